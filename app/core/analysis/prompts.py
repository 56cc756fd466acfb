# app/core/analysis/prompts.py

SENTIMENT_MAX_TOKENS = 100
TOPICS_MAX_TOKENS = 150
SUMMARY_MAX_TOKENS = 200

SENTIMENT_PROMPT = (
    "Analyze the sentiment of this customer feedback. Return ONLY JSON in this "
    'format: {{"sentiment": "positive"|"neutral"|"negative"|"mixed", '
    '"confidence": 0.0-1.0}}\n\n'
    "Feedback: {text}"
)

TOPICS_PROMPT = (
    "Extract key topics from this customer feedback. Return ONLY JSON in this "
    'format: {{"topics": ["topic1", "topic2", ...]}}\n\n'
    "Feedback: {text}"
)

SUMMARY_PROMPT = (
    "Summarize this customer feedback and provide one actionable recommendation. "
    'Return ONLY JSON in this format: {{"summary": "brief summary", '
    '"recommendation": "single actionable recommendation"}}\n\n'
    "Feedback: {text}"
)
