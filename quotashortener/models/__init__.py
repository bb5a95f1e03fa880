from quotashortener.models.url_record import URLRecord


__all__ = ['URLRecord']
