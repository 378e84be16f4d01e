# API Route Constants (relative to settings.API_BASE_URL)

# Auth routes
AUTH_BASE = '/auth'
AUTH_LOGIN = f'{AUTH_BASE}/login'
AUTH_LOGOUT = f'{AUTH_BASE}/logout'
AUTH_REGISTER = f'{AUTH_BASE}/register'
AUTH_VALIDATE = f'{AUTH_BASE}/validate'

# Event routes
EVENT_BASE = '/events'
EVENT_CREATE = EVENT_BASE
EVENT_LIST = EVENT_BASE
EVENT_GET = f'{EVENT_BASE}/{{event_id}}'
EVENT_PUBLIC_AVAILABLE = f'{EVENT_BASE}/public/available'
EVENT_PUBLIC_UPCOMING = f'{EVENT_BASE}/public/upcoming'
EVENT_PUBLIC_SEARCH = f'{EVENT_BASE}/public/search'
EVENT_PUBLIC_CATEGORY = f'{EVENT_BASE}/public/category/{{category}}'

# Ticket routes
TICKET_BASE = '/tickets'
TICKET_BOOK = f'{TICKET_BASE}/book'
TICKET_MINE = f'{TICKET_BASE}/mine'

# User routes
USER_BASE = '/users'
USER_PROFILE = f'{USER_BASE}/profile'

# Admin routes
ADMIN_BASE = '/admin'
ADMIN_STATS = f'{ADMIN_BASE}/stats'
ADMIN_EVENTS = f'{ADMIN_BASE}/events'
ADMIN_EVENT_DELETE = f'{ADMIN_BASE}/events/{{event_id}}'
ADMIN_RECENT_TICKETS = f'{ADMIN_BASE}/recent-tickets'
