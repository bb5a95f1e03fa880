# Log event codes
INVALID_FORM_BODY = 'INVALID_FORM_BODY'
INVALID_PARAMETER = 'INVALID_PARAMETER'
RECORD_CREATED = 'RECORD_CREATED'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
