"""
SRM Guide - Prompt Templates & User-Facing Strings
====================================================
Centralised prompt management for the AI assistant.  All prompts and
every pre-authored explanation shown to students live here so they can
be reviewed and edited independently of application logic.

Exports
-------
SRM_CONTEXT, PERSONA_INSTRUCTION, CHAT_PROMPT_TEMPLATE,
BLOG_PROMPT_TEMPLATE, BLOG_UNAVAILABLE_RESPONSE, BLOG_FAILURE_RESPONSE,
ASSISTANT_UNAVAILABLE_RESPONSE, PLACEHOLDER_TEXT, NEW_CHAT_GREETING,
SAMPLE_QUESTIONS, *_MESSAGE error explanations.
"""

# ══════════════════════════════════════════════════════════════════════
#  INSTITUTION CONTEXT
# ══════════════════════════════════════════════════════════════════════
# Static facts injected ahead of every question.  Update here when the
# university changes a rule; nothing else needs to change.

SRM_CONTEXT: str = """You are an AI assistant for SRM Guide, specifically designed to help freshers at SRM University (SRM Institute of Science and Technology) navigate college life.

Key SRM University Information:
- Located in Kattankulathur, Chennai, Tamil Nadu
- Follows semester system with credit-based evaluation
- Minimum 75% attendance required for all courses
- Grading scale: A(10), B(9), C(8), D(7), E(6), F(0)
- Total B.Tech credits required: 160
- Exam pattern: 3 Cycle Tests (30 marks) + Internal Assessment (20 marks) + End Semester Exam (50 marks) = 100 marks
- Pass criteria: Minimum 40% in both internal and end semester, overall 50% to pass
- Cycle tests happen in weeks 4-5, 8-9, and 12-13 of semester
- Hostel facilities available with mess, Wi-Fi, and recreational facilities
- Active placement cell with top companies visiting campus

Please provide accurate, helpful, and specific information about SRM University. If you're unsure about specific details, acknowledge it and suggest contacting the university directly."""

PERSONA_INSTRUCTION: str = "Please respond in a friendly, helpful manner as if you're a senior student guiding a fresher."


# ══════════════════════════════════════════════════════════════════════
#  PROMPT TEMPLATES
# ══════════════════════════════════════════════════════════════════════

CHAT_PROMPT_TEMPLATE: str = """{context}

User Question: {question}

{persona}"""

BLOG_PROMPT_TEMPLATE: str = """Write a comprehensive blog post about "{topic}" specifically for SRM University freshers.
Include practical tips, specific information about SRM, and actionable advice.
Format the response in HTML with proper headings (h2, h3), paragraphs, and lists.
Make it engaging and informative for first-year students."""

BLOG_UNAVAILABLE_RESPONSE: str = "AI content generation is currently unavailable. Please check back later."
BLOG_FAILURE_RESPONSE: str = "Unable to generate content at this time. Please try again later."


# ══════════════════════════════════════════════════════════════════════
#  CONVERSATION STRINGS
# ══════════════════════════════════════════════════════════════════════

PLACEHOLDER_TEXT: str = "Thinking…"

ASSISTANT_UNAVAILABLE_RESPONSE: str = "I'm sorry, but the AI Assistant is currently unavailable. The API key hasn't been configured yet. Please check our comprehensive FAQ section for answers to common questions about SRM University, or contact support for assistance."

NEW_CHAT_GREETING: str = "Hello! I'm your SRM Guide AI Assistant. I'm here to help you with any questions about SRM University. Ask me about academics, exams, attendance, hostel life, or anything else related to college life at SRM!"

SAMPLE_QUESTIONS: tuple[str, ...] = (
    "What is the minimum attendance required at SRM?",
    "How is the GPA calculated in SRM?",
    "When do cycle tests happen?",
    "What are the hostel rules and facilities?",
    "How do I join clubs at SRM?",
    "What is the exam pattern for B.Tech?",
    "How to prepare for placements at SRM?",
    "What is the credit system in SRM?",
)


# ══════════════════════════════════════════════════════════════════════
#  ERROR EXPLANATIONS — one per ErrorKind
# ══════════════════════════════════════════════════════════════════════

NOT_CONFIGURED_MESSAGE: str = "AI Assistant is currently unavailable. Please check our FAQ section for common questions about SRM University, or contact support for help."

INVALID_CREDENTIAL_MESSAGE: str = "I'm sorry, but there seems to be an issue with the API configuration. Please check our FAQ section for common questions."

QUOTA_EXCEEDED_MESSAGE: str = "The AI Assistant has exceeded its daily usage quota. Please try again tomorrow or check our FAQ section for common questions about SRM University."

OVERLOADED_MESSAGE: str = "I'm currently experiencing high traffic. Please try again in a moment, or check our FAQ section for common questions."

EMPTY_RESPONSE_MESSAGE: str = "I couldn't come up with an answer to that just now. Please try rephrasing your question or browse our FAQ section for common questions."

UNKNOWN_ERROR_MESSAGE: str = "I'm sorry, I'm having trouble processing your request right now. Please try again later or browse our FAQ section for common questions about SRM University."
