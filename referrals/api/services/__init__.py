# This file marks the services package for referral validation and persistence logic.
# Service modules isolate SQL from transport concerns.
