"""Application constants.

Contains the search skill vocabulary, candidate defaults, analytics limits
and the accepted resume content types.
"""

# ---------------------------------------------------------------------------
# Skill vocabulary
# Keywords recognised in free-text search queries.  Only used for query
# interpretation, never to validate what a candidate may list as a skill.
# ---------------------------------------------------------------------------
SKILL_VOCABULARY: list[str] = [
    # Languages
    "javascript", "js", "typescript", "ts", "python", "java", "c#", ".net",
    "ruby", "php", "go", "golang", "rust", "swift", "kotlin", "dart",
    # Frameworks
    "react", "angular", "vue", "node", "express", "django", "flask",
    "spring", "rails", "laravel", "flutter", "react native",
    # Cloud / infrastructure
    "aws", "azure", "gcp", "cloud", "devops", "docker", "kubernetes", "k8s",
    # Data stores / APIs
    "sql", "mysql", "postgresql", "mongodb", "nosql", "graphql", "rest", "api",
    # Front-end
    "html", "css", "scss", "sass", "tailwind", "bootstrap",
    "ui", "ux", "design",
    # Platforms
    "mobile", "ios", "android",
    # Seniority / roles
    "lead", "senior", "junior", "mid", "fullstack", "frontend", "backend",
    # Data / AI
    "data", "ai", "ml", "machine learning", "blockchain",
]

# Availability assigned to candidates created from a resume
DEFAULT_AVAILABILITY: str = "Immediate"

# Stored in place of an empty skill list
SKILLS_PLACEHOLDER: str = "None"

# ---------------------------------------------------------------------------
# Analytics limits
# ---------------------------------------------------------------------------
SEARCH_STATS_LIMIT: int = 50
TOP_VIEWED_LIMIT: int = 10
RECENT_SEARCHES_LIMIT: int = 20

# ---------------------------------------------------------------------------
# Resume upload
# ---------------------------------------------------------------------------
RESUME_CONTENT_TYPES: set[str] = {"application/pdf", "text/plain"}
