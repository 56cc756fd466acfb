# app/messages/analyze_messages.py

# ✅ Positive
ANALYSIS_COMPLETED = "Feedback analysis completed."
ANALYSIS_PARTIAL = "Feedback analysis completed with errors."

# ❌ Errors
ITEMS_REQUIRED = "Invalid request: items array is required"
QUOTA_EXCEEDED = (
    "Monthly analysis quota reached. Upgrade your plan or wait for the next period."
)
ANALYSIS_FAILED = "Feedback analysis failed due to internal server error."
