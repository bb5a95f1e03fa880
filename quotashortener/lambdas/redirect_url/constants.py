# Log event codes
MISSING_TOKEN = 'MISSING_TOKEN'
RECORD_NOT_FOUND = 'RECORD_NOT_FOUND'
MALFORMED_RECORD = 'MALFORMED_RECORD'
MAX_ACCESS_REACHED = 'MAX_ACCESS_REACHED'
MAX_PER_HOUR_REACHED = 'MAX_PER_HOUR_REACHED'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
