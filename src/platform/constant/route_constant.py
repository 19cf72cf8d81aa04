# API Route Constants

# Base API
API_BASE = '/api'

# Event routes
EVENT_BASE = f'{API_BASE}/event'
EVENT_CREATE = EVENT_BASE
EVENT_LIST = EVENT_BASE
EVENT_GET = f'{EVENT_BASE}/{{event_id}}'
EVENT_UPDATE = f'{EVENT_BASE}/{{event_id}}'
EVENT_DELETE = f'{EVENT_BASE}/{{event_id}}'
EVENT_PUBLISH = f'{EVENT_BASE}/{{event_id}}/publish'
EVENT_CANCEL = f'{EVENT_BASE}/{{event_id}}/cancel'
EVENT_ATTENDEES = f'{EVENT_BASE}/{{event_id}}/attendees'

# Booking routes
BOOKING_BASE = f'{API_BASE}/booking'
BOOKING_CREATE = BOOKING_BASE
BOOKING_RSVP = f'{BOOKING_BASE}/rsvp'
BOOKING_MY_BOOKINGS = f'{BOOKING_BASE}/my_booking'
BOOKING_GET = f'{BOOKING_BASE}/{{booking_id}}'
BOOKING_CANCEL = f'{BOOKING_BASE}/{{booking_id}}'

# Archive routes
ARCHIVE_BASE = f'{API_BASE}/archive'
ARCHIVE_LIST = ARCHIVE_BASE
ARCHIVE_STATS = f'{ARCHIVE_BASE}/stats'
ARCHIVE_EVENT = f'{ARCHIVE_BASE}/event/{{event_id}}'
ARCHIVE_BATCH = f'{ARCHIVE_BASE}/batch'
ARCHIVE_RESTORE = f'{ARCHIVE_BASE}/{{archive_id}}/restore'
ARCHIVE_LOG_CLEANUP = f'{ARCHIVE_BASE}/log/cleanup'
