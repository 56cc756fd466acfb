# app/messages/upload_messages.py

# ✅ Positive
UPLOAD_SUCCESS = "File uploaded and analyzed successfully."

# ❌ Errors
NO_VALID_FEEDBACK = "No valid feedback found in CSV file."
TEXT_COLUMN_NOT_FOUND = "Could not find text column in CSV."
UPLOAD_FAILED = "Failed to process the file due to internal server error."
