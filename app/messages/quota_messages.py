# app/messages/quota_messages.py

# ✅ Positive
QUOTA_FETCHED = "Quota fetched successfully."

# ❌ Errors
QUOTA_FETCH_FAILED = "Failed to fetch quota due to internal server error."
