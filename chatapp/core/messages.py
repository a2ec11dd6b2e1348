"""User-facing error messages and notification text."""

# Authentication messages
AUTH_INVALID_CREDENTIALS = "Invalid credentials"
AUTH_NOT_AUTHENTICATED = "Unauthorized - No token provided"
AUTH_TOKEN_INVALID = "Unauthorized - Invalid token"
AUTH_USER_NOT_FOUND = "User not found"
AUTH_USER_INACTIVE = "User is inactive"
AUTH_EMAIL_EXISTS = "Email already exists"
AUTH_LOGOUT_SUCCESS = "Logged out successfully"
AUTH_TOO_MANY_ATTEMPTS = "Too many login attempts. Try again in 15 minutes."

# Registration validation
REG_FULL_NAME_REQUIRED = "Full name is required"
REG_PASSWORD_TOO_SHORT = "Password must be at least 6 characters"

# Message sending
MESSAGE_CONTENT_REQUIRED = "Message text or image is required"
MESSAGE_RECEIVER_NOT_FOUND = "Receiver not found"
MESSAGE_SELF_SEND = "Cannot send a message to yourself"
MESSAGE_INVALID_PEER_ID = "Invalid user id"

# Bot
BOT_MESSAGE_REQUIRED = "Message is required"
BOT_SERVICE_UNAVAILABLE = "Bot service is not available"

# Client notification fallbacks, used when a failed response carries no message
CLIENT_USERS_FETCH_FAILED = "Could not fetch users"
CLIENT_MESSAGES_FETCH_FAILED = "Could not fetch messages"
CLIENT_SEND_FAILED = "Send failed"
CLIENT_BOT_FAILED = "Bot request failed"
CLIENT_LOGIN_FAILED = "Login failed"
CLIENT_SIGNUP_FAILED = "Signup failed"
CLIENT_LOGOUT_FAILED = "Logout failed"
CLIENT_LOGIN_SUCCESS = "Logged in successfully"
CLIENT_SIGNUP_SUCCESS = "Account created successfully"
CLIENT_LOGOUT_SUCCESS = "Logged out successfully"

# General error messages
ERROR_INTERNAL_SERVER = "Internal server error"
