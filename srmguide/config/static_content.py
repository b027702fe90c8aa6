"""
SRM Guide - Static Reference Content
=====================================
In-memory table of FAQ entries and blog posts searched alongside the
community Q&A board.  Each entry carries a keyword list so short queries
("gpa", "mess") still find the right page.

Entry schema::

    {
        "id": str,
        "title": str,
        "content": str,
        "kind": "faq" | "blog",
        "category": str,
        "url": str,
        "keywords": tuple[str, ...],
    }
"""

ReferenceEntry = dict[str, str | tuple[str, ...]]


# ══════════════════════════════════════════════════════════════════════
#  FAQ ENTRIES
# ══════════════════════════════════════════════════════════════════════

FAQ_ENTRIES: tuple[ReferenceEntry, ...] = (
    {"id": "faq-attendance", "title": "Attendance Requirements", "content": "Minimum 75% attendance required for all courses...", "kind": "faq", "category": "academics", "url": "/faq#attendance", "keywords": ("attendance", "75%", "minimum", "requirement")},
    {"id": "faq-gpa", "title": "GPA Calculation", "content": "How to calculate your GPA at SRM University...", "kind": "faq", "category": "academics", "url": "/faq#academics", "keywords": ("gpa", "grade", "calculation", "points")},
    {"id": "faq-hostel", "title": "Hostel Life", "content": "Everything about hostel facilities and rules...", "kind": "faq", "category": "hostel", "url": "/faq#hostel", "keywords": ("hostel", "accommodation", "mess", "facilities")},
    {"id": "faq-exams", "title": "Exams & Evaluation", "content": "Cycle tests, internal assessment and end semester exam pattern...", "kind": "faq", "category": "exams", "url": "/faq#exams", "keywords": ("exam", "cycle test", "internal", "semester", "pass")},
    {"id": "faq-clubs", "title": "Clubs & Activities", "content": "How to join clubs and societies on campus...", "kind": "faq", "category": "clubs", "url": "/faq#clubs", "keywords": ("club", "society", "activities", "events")},
    {"id": "faq-placement", "title": "Placement & Training", "content": "When placement activities start and how to prepare...", "kind": "faq", "category": "placement", "url": "/faq#placement", "keywords": ("placement", "internship", "recruitment", "companies")},
)


# ══════════════════════════════════════════════════════════════════════
#  BLOG POSTS
# ══════════════════════════════════════════════════════════════════════

BLOG_POSTS: tuple[ReferenceEntry, ...] = (
    {"id": "blog-surviving-first-year-srm", "title": "Complete Guide to Surviving Your First Year at SRM", "content": "Essential tips and strategies to make your first year at SRM University successful and memorable.", "kind": "blog", "category": "First Year Guide", "url": "/blog/surviving-first-year-srm", "keywords": ("first year", "fresher", "tips")},
    {"id": "blog-cycle-test-preparation", "title": "How to Prepare for Cycle Tests: A Complete Strategy", "content": "Master the art of cycle test preparation with proven strategies and time management techniques.", "kind": "blog", "category": "Academics", "url": "/blog/cycle-test-preparation", "keywords": ("cycle test", "exam", "preparation", "study")},
    {"id": "blog-top-clubs-srm", "title": "Top 10 Clubs Every SRM Student Should Consider Joining", "content": "Discover the best clubs at SRM that can enhance your skills and boost your resume.", "kind": "blog", "category": "Campus Life", "url": "/blog/top-clubs-srm", "keywords": ("club", "society", "resume")},
    {"id": "blog-gpa-calculation-guide", "title": "Understanding the GPA System: Calculate Like a Pro", "content": "Learn how to calculate your GPA correctly and understand the grading system at SRM.", "kind": "blog", "category": "Academics", "url": "/blog/gpa-calculation-guide", "keywords": ("gpa", "grade", "credits")},
    {"id": "blog-hostel-life-guide", "title": "Hostel Life at SRM: What to Expect and How to Thrive", "content": "Everything you need to know about hostel life, from room allocation to mess timings.", "kind": "blog", "category": "Hostel Life", "url": "/blog/hostel-life-guide", "keywords": ("hostel", "mess", "room")},
    {"id": "blog-placement-preparation-guide", "title": "Placement Preparation: Starting from Day One", "content": "Begin your placement preparation from the first year with these essential tips and strategies.", "kind": "blog", "category": "Placements", "url": "/blog/placement-preparation-guide", "keywords": ("placement", "career", "interview")},
)


STATIC_REFERENCE_ENTRIES: tuple[ReferenceEntry, ...] = FAQ_ENTRIES + BLOG_POSTS
