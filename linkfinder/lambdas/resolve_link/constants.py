# Events
REFERENCE_RESOLVED = 'REFERENCE_RESOLVED'
REFERENCE_NOT_FOUND = 'REFERENCE_NOT_FOUND'
