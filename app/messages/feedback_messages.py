# app/messages/feedback_messages.py

# ✅ Positive
FEEDBACK_FETCHED = "Feedback fetched successfully."

# ❌ Errors
FEEDBACK_FETCH_FAILED = "Failed to fetch feedback due to internal server error."
