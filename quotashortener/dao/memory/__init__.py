from quotashortener.dao.memory.url_record_memory_dao import URLRecordMemoryDAO


__all__ = ['URLRecordMemoryDAO']
