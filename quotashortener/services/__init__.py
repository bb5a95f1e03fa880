from quotashortener.services.url_records import Resolution, create_url_record, resolve_url_record, validate_max_age


__all__ = [
    'Resolution',
    'create_url_record',
    'resolve_url_record',
    'validate_max_age',
]
