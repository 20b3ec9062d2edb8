"""
Guidance prompts: deployment checklist, release strategy, rollback runbook, ASO.

Pure templating. Category arguments are matched case-insensitively against
small lookup tables; anything unrecognised gets the generic paragraph.
"""
import logging
from typing import Dict, Optional

from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)

GENERIC = "default"


def _pick(table: Dict[str, str], key: Optional[str]) -> str:
    return table.get((key or "").strip().lower(), table[GENERIC]).strip("\n")


def _or_placeholder(value: Optional[str], placeholder: str) -> str:
    return value.strip() if value and value.strip() else f"[{placeholder}]"


# ============= RELEASE STRATEGY TABLES =============

ALPHA_BY_USER_BASE = {
    "small": """
- **Duration**: 3-5 days
- **Users**: 10-50 trusted users
- **Focus**: Core functionality validation
""",
    "medium": """
- **Duration**: 1 week
- **Users**: 100-500 power users
- **Focus**: Performance and edge cases
""",
    "large": """
- **Duration**: 1-2 weeks
- **Users**: 1000+ alpha testers
- **Focus**: Scalability and performance under load
""",
    GENERIC: """
- **Duration**: 1 week
- **Users**: 100-500 users
- **Focus**: Comprehensive testing
""",
}

BETA_BY_USER_BASE = {
    "small": """
- **Duration**: 1 week
- **Users**: 50-200 users
- **Rollout**: 100% to beta track
""",
    "medium": """
- **Duration**: 2 weeks
- **Users**: 1000-5000 users
- **Rollout**: Start 10%, increase to 50%
""",
    "large": """
- **Duration**: 2-3 weeks
- **Users**: 10000+ beta users
- **Rollout**: Gradual 5% -> 20% -> 50%
""",
    GENERIC: """
- **Duration**: 1-2 weeks
- **Users**: 500-2000 users
- **Rollout**: Gradual rollout recommended
""",
}

PRODUCTION_BY_USER_BASE = {
    "small": """
- **Initial Rollout**: 100% (if beta successful)
- **Monitoring**: 24 hours intensive
- **Rollback Threshold**: >2% crash rate
""",
    "medium": """
- **Initial Rollout**: 10% for 24 hours (rolloutFraction: 0.1)
- **Increase to**: 50% after 48 hours
- **Full Release**: After 1 week if stable
- **Rollback Threshold**: >1% crash rate
""",
    "large": """
- **Initial Rollout**: 1% for 24 hours (rolloutFraction: 0.01)
- **Gradual Increase**: 5% -> 10% -> 25% -> 50% -> 100%
- **Each Stage**: Monitor for 48-72 hours
- **Rollback Threshold**: >0.5% crash rate
""",
    GENERIC: """
- **Initial Rollout**: 20% for monitoring (rolloutFraction: 0.2)
- **Full Release**: After validation period
- **Rollback Threshold**: >1% crash rate
""",
}

APP_TYPE_NOTES = {
    "game": """
### Gaming Apps
- **Extra Alpha Focus**: Performance on various devices
- **Beta Metrics**: Frame rates, loading times, IAP functionality
- **Production**: Monitor engagement metrics closely
""",
    "social": """
### Social Apps
- **Extra Alpha Focus**: Privacy and security features
- **Beta Metrics**: User interaction patterns, notification delivery
- **Production**: Monitor user growth and retention
""",
    "utility": """
### Utility Apps
- **Extra Alpha Focus**: Core functionality reliability
- **Beta Metrics**: Task completion rates, performance
- **Production**: Monitor daily active usage patterns
""",
    "business": """
### Business Apps
- **Extra Alpha Focus**: Security and data integrity
- **Beta Metrics**: Workflow efficiency, enterprise features
- **Production**: Monitor business impact metrics
""",
    GENERIC: """
### General Apps
- **Extra Alpha Focus**: Core user journey completion
- **Beta Metrics**: User satisfaction and feature adoption
- **Production**: Monitor key performance indicators
""",
}

# ============= ROLLBACK TABLES =============

ROLLBACK_BY_SEVERITY = {
    "critical": """
#### CRITICAL - Immediate Action Required
**Time to Act**: < 30 minutes

1. **STOP ROLLOUT IMMEDIATELY**
   - Halt any ongoing releases
   - Contact incident response team
2. **ASSESS IMPACT**
   - Check `playstore://stats` for crash rates
   - Review user reports and feedback
3. **IMPLEMENT ROLLBACK**
   - Deploy previous stable version with higher version code
   - Use emergency release process
""",
    "high": """
#### HIGH - Urgent Action Required
**Time to Act**: < 2 hours

1. **PAUSE ROLLOUT**
   - Stop gradual rollout expansion
   - Assess current impact scope
2. **GATHER DATA**
   - Analyze crash reports and metrics
   - Identify root cause if possible
3. **DECIDE ON ROLLBACK**
   - If >1% crash rate: immediate rollback
   - If fixable quickly: hotfix deployment
""",
    "medium": """
#### MEDIUM - Planned Response
**Time to Act**: < 24 hours

1. **MONITOR CLOSELY**
   - Increase monitoring frequency
   - Collect additional user feedback
2. **PREPARE HOTFIX**
   - Develop fix if issue is identified
   - Test thoroughly before deployment
3. **CONTROLLED ROLLBACK**
   - If needed, can wait for next release cycle
   - Document lessons learned
""",
    GENERIC: """
#### Standard Response Process
**Time to Act**: < 72 hours

1. **INVESTIGATE**
   - Gather comprehensive data
   - Reproduce issue if possible
2. **PLAN RESOLUTION**
   - Develop proper fix
   - Schedule deployment
3. **IMPLEMENT FIX**
   - Deploy through normal release process
   - Monitor results
""",
}

ROLLBACK_BY_ISSUE = {
    "crash": """
**Crash Issues**:
- Priority: Stop bleeding users immediately
- Check: Specific device/OS combinations affected
- Action: Rollback if >1% crash rate increase
- Follow-up: Collect crash logs for post-mortem
""",
    "performance": """
**Performance Issues**:
- Priority: Monitor user experience metrics
- Check: Loading times, responsiveness, battery usage
- Action: Rollback if >50% degradation in key metrics
- Follow-up: Performance profiling and optimization
""",
    "security": """
**Security Issues**:
- Priority: CRITICAL - Immediate action required
- Check: Data exposure, unauthorized access
- Action: Immediate rollback regardless of user impact
- Follow-up: Security audit and incident report
""",
    "feature": """
**Feature Issues**:
- Priority: Assess business impact
- Check: Feature adoption rates, user workflow disruption
- Action: Rollback if core functionality broken
- Follow-up: Feature testing improvements
""",
    GENERIC: """
**General Issues**:
- Priority: Assess user impact and business risk
- Check: Overall app stability and user satisfaction
- Action: Rollback based on impact severity
- Follow-up: Root cause analysis
""",
}

# ============= ASO TABLES =============

# (minimum rating, guidance), checked top-down
RATING_BANDS = (
    (4.5, """
**Excellent Rating (4.5+)**
- Focus on maintaining quality
- Leverage high rating in app description
- Consider expanding to new markets
- Use positive reviews in marketing materials
"""),
    (4.0, """
**Good Rating (4.0-4.4)**
- Work on pushing to 4.5+ threshold
- Address common complaints in reviews
- Improve user onboarding experience
- Focus on reducing 1-star reviews
"""),
    (3.5, """
**Average Rating (3.5-3.9)**
- Critical: Must improve to stay competitive
- Analyze negative reviews for patterns
- Fix top reported bugs immediately
- Improve core user experience
"""),
)

LOW_RATING = """
**Low Rating (<3.5)**
- URGENT: App quality issues need immediate attention
- Consider major update or redesign
- Focus on stability and core functionality
- Implement user feedback system
"""

UNKNOWN_RATING = """
**Unknown Rating**
- Collect at least a few weeks of ratings before optimizing
- Prompt satisfied users to leave a review
- Track rating changes after every release
"""

TREND_NOTES = {
    "increasing": """
**Increasing Downloads**
- Capitalize on momentum
- Ensure app can handle increased load
- Prepare for higher user support volume
- Consider expanding feature set
""",
    "stable": """
**Stable Downloads**
- Optimize for better conversion
- Experiment with app store listing
- Focus on user retention improvements
- Consider seasonal promotion strategies
""",
    "declining": """
**Declining Downloads**
- URGENT: Identify cause of decline
- Refresh app store listing immediately
- Consider feature updates or redesign
- Analyze competitor movements
""",
    GENERIC: """
**Unknown Trend**
- Monitor downloads closely
- Set up analytics tracking
- Establish baseline metrics
- Regular performance reviews
""",
}


def rating_guidance(rating: Optional[str]) -> str:
    try:
        value = float((rating or "").strip())
    except ValueError:
        return UNKNOWN_RATING.strip("\n")
    for minimum, text in RATING_BANDS:
        if value >= minimum:
            return text.strip("\n")
    return LOW_RATING.strip("\n")


# ============= PROMPT BUILDERS =============

def deployment_guide(app_package: Optional[str] = None, target_track: Optional[str] = None) -> str:
    app = _or_placeholder(app_package, "APP_PACKAGE")
    track = _or_placeholder(target_track, "TARGET_TRACK")
    return f"""# Play Store Deployment Guide

## Pre-deployment Checklist

Before deploying **{app}** to **{track}** track, ensure you have:

### Requirements
- [ ] APK/AAB file built and signed
- [ ] Version code higher than current production version
- [ ] Release notes prepared
- [ ] Testing completed on previous track (if applicable)

### Verification Steps
1. **Check current app status**: Use `playstore://apps` resource to see current version
2. **Review release pipeline**: Use `playstore://releases` resource for active deployments
3. **Validate app statistics**: Check `playstore://stats` for current performance

### Deployment Process

#### For Internal Track:
```
Use tool: deploy_app
Parameters:
- packageName: {app}
- track: internal
- binaryPath: /path/to/your/app.aab
- versionCode: [NEW_VERSION_CODE]
- releaseNotes: "Describe changes in this release"
```

#### For Alpha/Beta/Production:
1. **First deploy to internal** (if not already done)
2. **Use promote_release tool**:
```
Parameters:
- packageName: {app}
- fromTrack: internal
- toTrack: {track}
- versionCode: [VERSION_CODE]
```

### Post-deployment Monitoring
- Monitor rollout progress via `playstore://releases`
- Check crash rates in `playstore://stats`
- Review user feedback and ratings

### Rollback Plan
If issues are detected:
1. Stop expanding the staged rollout
2. Deploy hotfix version with higher version code
3. Monitor metrics closely

## Best Practices
- Always test in internal track first
- Use gradual rollout (rolloutFraction < 1.0) for production releases
- Keep release notes clear and informative
- Monitor crash rates and user feedback

Would you like me to help you with any specific step in this deployment process?"""


def release_strategy(app_type: Optional[str] = None, user_base: Optional[str] = None) -> str:
    kind = _or_placeholder(app_type, "APP_TYPE")
    base = _or_placeholder(user_base, "USER_BASE")
    return f"""# Release Strategy Guide

## App Profile
- **Type**: {kind}
- **User Base**: {base}

## Recommended Release Strategy

### For {base} User Base Apps:

#### Internal Testing (Always Required)
- **Duration**: 1-2 days minimum
- **Purpose**: Basic functionality and crash testing
- **Team**: Internal QA team and developers

#### Alpha Testing
{_pick(ALPHA_BY_USER_BASE, user_base)}

#### Beta Testing
{_pick(BETA_BY_USER_BASE, user_base)}

#### Production Release
{_pick(PRODUCTION_BY_USER_BASE, user_base)}

## App-Specific Considerations for {kind} Apps:

{_pick(APP_TYPE_NOTES, app_type)}

## Monitoring Checklist
- [ ] Crash rate < acceptable threshold
- [ ] Performance metrics stable
- [ ] User feedback reviewed
- [ ] Key features functioning
- [ ] No security issues reported

## Tools to Use
1. **deploy_app**: For initial deployments to each track
2. **promote_release**: For moving between tracks
3. **Resources**: Monitor via `playstore://stats` and `playstore://releases`

Would you like me to create a specific deployment plan for your app?"""


def rollback_guide(issue_type: Optional[str] = None, severity: Optional[str] = None) -> str:
    issue = _or_placeholder(issue_type, "ISSUE_TYPE")
    level = _or_placeholder(severity, "SEVERITY")
    return f"""# Emergency Rollback Guide

## Issue Assessment
- **Issue Type**: {issue}
- **Severity**: {level}

## Immediate Actions Required

### For {level} Severity {issue} Issues:

{_pick(ROLLBACK_BY_SEVERITY, severity)}

## Rollback Procedures

### Step 1: Assessment
```
Use resource: playstore://releases
Use resource: playstore://stats

Look for:
- Crash rates above baseline
- User rating drops
- Negative feedback patterns
```

### Step 2: Deploy Previous Version
The Play Store never accepts a lower version code, so a rollback is a
re-release of the last good build under a new, higher version code.
```json
{{
  "tool": "deploy_app",
  "arguments": {{
    "packageName": "[APP_PACKAGE]",
    "track": "production",
    "binaryPath": "[PREVIOUS_STABLE_AAB]",
    "versionCode": "[CURRENT_VERSION + 1]",
    "releaseNotes": "Emergency rollback - reverted to stable version"
  }}
}}
```

## Issue-Specific Procedures

### For {issue} Issues:
{_pick(ROLLBACK_BY_ISSUE, issue_type)}

## Post-Rollback Actions

### Immediate (0-2 hours)
- [ ] Confirm rollback deployment successful
- [ ] Monitor key metrics for stabilization
- [ ] Communicate with stakeholders
- [ ] Document incident timeline

### Short-term (2-24 hours)
- [ ] Conduct post-mortem meeting
- [ ] Identify root cause
- [ ] Plan permanent fix
- [ ] Update testing procedures

### Long-term (1-7 days)
- [ ] Implement comprehensive fix
- [ ] Enhance testing coverage
- [ ] Update release procedures

## Prevention Strategies
1. **Better Testing**: Expand test coverage for detected issue type
2. **Gradual Rollouts**: Always use staged rollouts
3. **Monitoring**: Implement proactive alerting

Remember: it is better to roll back quickly and fix properly than to leave users on a broken app."""


def aso_optimization(current_rating: Optional[str] = None, download_trend: Optional[str] = None) -> str:
    rating = _or_placeholder(current_rating, "CURRENT_RATING")
    trend = _or_placeholder(download_trend, "DOWNLOAD_TREND")
    return f"""# App Store Optimization (ASO) Guide

## Current App Performance
- **Rating**: {rating}
- **Download Trend**: {trend}

## Optimization Recommendations

### Based on Your Current Rating ({rating}):
{rating_guidance(current_rating)}

### Based on Download Trend ({trend}):
{_pick(TREND_NOTES, download_trend)}

## ASO Action Plan

### 1. Metadata Optimization
Use the `update_app_metadata` tool to improve:

```json
{{
  "tool": "update_app_metadata",
  "arguments": {{
    "packageName": "[YOUR_APP_PACKAGE]",
    "title": "[OPTIMIZED_TITLE_WITH_KEYWORDS]",
    "shortDescription": "[COMPELLING_80_CHAR_DESCRIPTION]",
    "fullDescription": "[KEYWORD_RICH_FULL_DESCRIPTION]"
  }}
}}
```

#### Title Optimization:
- Include primary keyword
- Keep within 30 characters
- Make it memorable and descriptive
- Avoid keyword stuffing

#### Description Optimization:
- **First 125 characters** are critical (visible without "read more")
- Include top 5 keywords naturally
- Use bullet points for features

### 2. Visual Assets
- **App Icon**: A/B test different versions
- **Screenshots**: Show key features and benefits
- **Feature Graphic**: Eye-catching banner for promotions

### 3. Rating & Review Strategy
- **In-App Prompts**: Ask satisfied users to rate
- **Timing**: Prompt after positive interactions
- **Feedback Loop**: Respond to negative reviews

### 4. Monitoring
- `playstore://stats` - Download and rating trends
- `playstore://apps` - Current app status

## Red Flags to Address Immediately
- Rating drops below 4.0
- Download decline >20% week-over-week
- Increase in 1-star reviews

Would you like me to help you create a specific ASO improvement plan for your app?"""


PROMPT_NAMES = ("deployment_guide", "release_strategy", "rollback_guide", "aso_optimization")


def register_prompts(mcp: FastMCP):
    logger.info("Registering Play Store MCP prompts...")

    @mcp.prompt(name="deployment_guide", description="Interactive guide for deploying an app to Play Store")
    def deployment_guide_prompt(appPackage: Optional[str] = None, targetTrack: Optional[str] = None) -> str:
        logger.info("Deployment guide prompt requested for: %s", appPackage)
        return deployment_guide(appPackage, targetTrack)

    @mcp.prompt(name="release_strategy", description="Guide for choosing the optimal release strategy")
    def release_strategy_prompt(appType: Optional[str] = None, userBase: Optional[str] = None) -> str:
        logger.info("Release strategy prompt requested for: %s app with %s user base", appType, userBase)
        return release_strategy(appType, userBase)

    @mcp.prompt(name="rollback_guide", description="Emergency rollback procedures for problematic releases")
    def rollback_guide_prompt(issueType: Optional[str] = None, severity: Optional[str] = None) -> str:
        logger.info("Rollback guide prompt requested for: %s issue with %s severity", issueType, severity)
        return rollback_guide(issueType, severity)

    @mcp.prompt(name="aso_optimization", description="App Store Optimization guide for better discoverability")
    def aso_optimization_prompt(currentRating: Optional[str] = None, downloadTrend: Optional[str] = None) -> str:
        logger.info("ASO optimization prompt requested for rating: %s, trend: %s", currentRating, downloadTrend)
        return aso_optimization(currentRating, downloadTrend)

    logger.info("Play Store prompts registered successfully: %s", ", ".join(PROMPT_NAMES))
