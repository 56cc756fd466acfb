# app/messages/auth_messages.py

# ❌ Errors
USER_ID_REQUIRED = "Unauthorized: missing X-User-Id header."
