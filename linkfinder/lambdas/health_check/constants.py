# EventBridge scheduled events carry this source
SCHEDULED_EVENT_SOURCE = 'aws.events'

# Events
SCHEDULED_CHECK = 'SCHEDULED_CHECK'
