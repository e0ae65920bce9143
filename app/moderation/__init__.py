"""
Moderation app: spam scoring, user reports and admin moderation actions.

This app provides:
- SpamFilter, a stateless keyword/pattern spam scorer
- Report model for user and automatic reports
- ModerationService for auto-moderation, reports, hide/unhide and suspension
- Admin REST API under /api/v1/moderation/
"""
