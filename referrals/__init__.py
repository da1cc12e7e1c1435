"""
Package marker for the referral API service.
It groups the HTTP layer under `referrals.api` and shared helpers under `referrals.common`.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
