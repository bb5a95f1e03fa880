from quotashortener.policy.access_policy import AccessOutcome, AccessDecision, evaluate_access, HOURLY_WINDOW


__all__ = [
    'AccessOutcome',
    'AccessDecision',
    'evaluate_access',
    'HOURLY_WINDOW',
]
