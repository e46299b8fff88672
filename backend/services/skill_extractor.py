"""Pattern-based skill mining for free-form job descriptions.

Used when a role carries no structured skill data. Combines:
1. A fixed battery of technology-name patterns applied to the full text
2. A second look at the 100 characters after requirement phrases ("experience with", ...)
3. Parsing of delimited lists that follow list-introducing phrases
Every hit is cleaned, validated and normalized through the skill taxonomy.
"""

import logging
import re
from collections.abc import Iterable

from models.schemas.extraction import SkillExperience
from services.skill_taxonomy import SkillTaxonomy, get_taxonomy

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Technology batteries. Terms in _CASE_SENSITIVE_TERMS double as ordinary
# English words ("go", "rest", "swift", "express") and only count when
# written the way the technology is.
# ---------------------------------------------------------------------------
SKILL_BATTERIES: dict[str, tuple[str, ...]] = {
    "languages": (
        "JavaScript", "TypeScript", "Python", "Java", "C#", "C++", "F#", "PHP",
        "Ruby", "Kotlin", "Scala", "Clojure", "Erlang", "Elixir", "Haskell",
        "VB.NET", "Perl", "MATLAB", "Golang", "Objective-C",
    ),
    "frontend": (
        "React", "Angular", "Vue.js", "Vue", "Svelte", "Ember.js", "Backbone.js",
        "jQuery", "Bootstrap", "TailwindCSS", "Tailwind", "Material-UI",
        "Ant Design", "Chakra UI", "Redux", "Next.js", "Gatsby", "HTML5", "HTML",
    ),
    "backend": (
        "Node.js", "Express.js", "Django", "Flask", "FastAPI", "Spring Boot",
        "Laravel", "Ruby on Rails", "ASP.NET", ".NET", "Fastify", "NestJS",
    ),
    "databases": (
        "MySQL", "PostgreSQL", "Postgres", "MongoDB", "Redis", "SQLite",
        "SQL Server", "MariaDB", "CouchDB", "Cassandra", "DynamoDB", "Neo4j",
        "InfluxDB", "Elasticsearch", "NoSQL", "SQL",
    ),
    "cloud": (
        "AWS", "Azure", "Google Cloud", "GCP", "DigitalOcean", "Heroku",
        "Vercel", "Netlify", "Firebase", "Supabase",
    ),
    "devops": (
        "Docker", "Kubernetes", "K8s", "Jenkins", "GitLab CI", "GitHub Actions",
        "Travis CI", "CircleCI", "Ansible", "Terraform", "Vagrant", "Nginx",
        "CI/CD", "Linux",
    ),
    "version_control": ("Git", "SVN", "Mercurial"),
    "testing": (
        "Jest", "Mocha", "Cypress", "Selenium", "Puppeteer", "Playwright",
        "JUnit", "PyTest", "RSpec", "PHPUnit",
    ),
    "mobile": ("React Native", "Flutter", "Xamarin", "Cordova", "PhoneGap"),
    "data_ml": (
        "TensorFlow", "PyTorch", "Pandas", "NumPy", "Scikit-learn", "Keras",
        "OpenCV", "Matplotlib", "Seaborn", "Jupyter", "Apache Spark", "Hadoop",
        "Machine Learning",
    ),
    "design": (
        "CSS3", "CSS", "SCSS", "Sass", "PostCSS", "Figma", "Adobe XD",
        "Photoshop", "Illustrator",
    ),
    "protocols": ("GraphQL", "RESTful", "gRPC", "WebSocket", "JSON", "XML", "YAML"),
    "methodologies": (
        "Agile", "Scrum", "Kanban", "DevOps", "TDD", "BDD", "MVC", "MVVM",
        "Microservices", "Serverless", "JAMstack",
    ),
    "variations": (
        "ReactJS", "React.js", "NodeJS", "VueJS", "AngularJS", "ExpressJS",
        "NextJS", "JS", "ES6", "ES2015", "ES2017", "ES2018", "ES2019", "ES2020",
        "ES2021", "ES2022", "ECMAScript", "TS", "Type Script", "Mongo",
        "Amazon Web Services", "Microsoft Azure", "Google Cloud Platform",
    ),
}

_CASE_SENSITIVE_TERMS: tuple[str, ...] = (
    "Go", "Rust", "Swift", "Julia", "Dart", "SAS", "Ember", "Express", "Node",
    "Spring", "Rails", "Phoenix", "Koa", "Oracle", "Ionic", "Less", "Stylus",
    "Sketch", "REST", "SOAP",
)

# Phrases after which a job description usually lists technologies
REQUIREMENT_PHRASES: tuple[str, ...] = (
    "experience with",
    "knowledge of",
    "proficient in",
    "skilled in",
    "familiar with",
    "expertise in",
    "working knowledge of",
    "strong background in",
    "competency in",
    "understanding of",
    "hands-on experience with",
    "proven experience in",
    "solid understanding of",
    "deep knowledge of",
    "expert level",
    "advanced level",
    "intermediate level",
    "beginner level",
    "must know",
    "required:",
    "requirements:",
    "tech stack:",
    "technologies:",
    "tools:",
    "frameworks:",
    "languages:",
)

_PHRASE_WINDOW = 100
_MAX_LIST_ITEM_LENGTH = 30

_LIST_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(
        r"(?:experience with|knowledge of|proficient in|skilled in|familiar with|expertise in)"
        r"[:\s]+([^.]+)",
        re.IGNORECASE,
    ),
    re.compile(r"(?:technologies|tools|frameworks|languages)[:\s]+([^.]+)", re.IGNORECASE),
    re.compile(r"(?:tech stack|technology stack)[:\s]+([^.]+)", re.IGNORECASE),
    re.compile(r"(?:requirements|required)[:\s]+([^.]+)", re.IGNORECASE),
)
_LIST_SEPARATORS = re.compile(r"[,;|&\n]")

# "5+ years of experience with Python", "3+ years of Go", "3 years Django
# experience", "minimum 2 years in Go", "at least 4 years of AWS". A dot only
# continues the skill text inside a name like Node.js, never across sentences.
_SKILL_TEXT = r"((?:[a-zA-Z\s\-]|\.(?=[a-zA-Z]))+)"
_CLAUSE_END = r"(?:\s*(?:and|,|\.|$))"
_EXPERIENCE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(
        r"(\d+)\+?\s*years?\s*(?:of\s*)?(?:experience\s*)?(?:with\s*|in\s*|using\s*)"
        + _SKILL_TEXT + _CLAUSE_END,
        re.IGNORECASE,
    ),
    re.compile(r"(\d+)\+?\s*years?\s+of\s+" + _SKILL_TEXT + _CLAUSE_END, re.IGNORECASE),
    re.compile(
        r"(\d+)\+?\s*years?\s*" + _SKILL_TEXT + r"\s*(?:experience|development)" + _CLAUSE_END,
        re.IGNORECASE,
    ),
    re.compile(
        r"minimum\s*(\d+)\+?\s*years?\s*(?:with\s*|in\s*|of\s*)" + _SKILL_TEXT + _CLAUSE_END,
        re.IGNORECASE,
    ),
    re.compile(
        r"at\s*least\s*(\d+)\+?\s*years?\s*(?:with\s*|in\s*|of\s*)" + _SKILL_TEXT + _CLAUSE_END,
        re.IGNORECASE,
    ),
)
_MAX_PLAUSIBLE_YEARS = 20

SKILL_CATEGORIES: dict[str, tuple[str, ...]] = {
    "programming": (
        "JavaScript", "TypeScript", "Python", "Java", "C#", "C++", "PHP", "Ruby",
        "Go", "Rust", "Swift", "Kotlin", "Scala",
    ),
    "frontend": (
        "React", "Angular", "Vue.js", "Svelte", "jQuery", "Bootstrap",
        "TailwindCSS", "CSS", "HTML", "Next.js", "Redux",
    ),
    "backend": (
        "Node.js", "Express.js", "Django", "Flask", "FastAPI", "Spring",
        "Laravel", "Ruby on Rails", "ASP.NET", "NestJS",
    ),
    "database": (
        "MySQL", "PostgreSQL", "MongoDB", "Redis", "SQLite", "Oracle",
        "SQL Server", "SQL", "Elasticsearch", "DynamoDB", "Cassandra",
    ),
    "cloud": ("AWS", "Azure", "Google Cloud", "Firebase", "Heroku", "Vercel", "Netlify"),
    "devops": (
        "Docker", "Kubernetes", "Jenkins", "Git", "CI/CD", "Ansible",
        "Terraform", "GitHub Actions",
    ),
    "mobile": ("React Native", "Flutter", "Xamarin", "Ionic", "Swift", "Kotlin"),
    "design": ("Figma", "Sketch", "Adobe XD", "Photoshop", "CSS", "Sass"),
}
CATEGORY_NAMES: tuple[str, ...] = (*SKILL_CATEGORIES, "other")


def _compile_battery(terms: Iterable[str], flags: int = 0) -> re.Pattern:
    # Longest first so "React Native" wins over "React" and "SQL Server" over "SQL".
    # ".", "#" and "+" belong to a token: no "Java" in "JavaScript", no "JS" in "Node.js".
    ordered = sorted(set(terms), key=len, reverse=True)
    alternation = "|".join(re.escape(t).replace(r"\ ", r"\s+") for t in ordered)
    return re.compile(rf"(?<![\w.#+])(?:{alternation})(?![\w#+])", flags)


_INSENSITIVE_BATTERY = _compile_battery(
    (term for terms in SKILL_BATTERIES.values() for term in terms),
    re.IGNORECASE,
)
_SENSITIVE_BATTERY = _compile_battery(_CASE_SENSITIVE_TERMS)


def battery_terms() -> list[str]:
    """Every literal term the pattern batteries can match."""
    terms = [t for group in SKILL_BATTERIES.values() for t in group]
    return terms + list(_CASE_SENSITIVE_TERMS)


def _opens_sentence(text: str, pos: int) -> bool:
    before = text[:pos].rstrip(" \t")
    return not before or before[-1] in ".!?\n"


def _scan(
    text: str,
    taxonomy: SkillTaxonomy,
    found: dict[str, bool],
    start: int = 0,
    end: int | None = None,
    in_requirement: bool = False,
) -> None:
    # Matching runs over the whole text from ``start`` so a name crossing
    # ``end`` is seen in full; only matches beginning before ``end`` count.
    for battery in (_INSENSITIVE_BATTERY, _SENSITIVE_BATTERY):
        for match in battery.finditer(text, start):
            if end is not None and match.start() >= end:
                break
            # "Go above and beyond." reads the same as the language
            confirmed = (
                in_requirement
                or battery is _INSENSITIVE_BATTERY
                or not _opens_sentence(text, match.start())
            )
            _add_candidate(match.group(0), taxonomy, found, confirmed)


def _add_candidate(
    raw: str,
    taxonomy: SkillTaxonomy,
    found: dict[str, bool],
    confirmed: bool = True,
) -> None:
    cleaned = taxonomy.clean(raw)
    if not taxonomy.is_valid_skill_name(cleaned):
        return
    skill = taxonomy.normalize(cleaned)
    found[skill] = found.get(skill, False) or confirmed


def _scan_requirement_windows(
    description: str,
    taxonomy: SkillTaxonomy,
    found: dict[str, bool],
) -> None:
    lowered = description.lower()
    for phrase in REQUIREMENT_PHRASES:
        idx = lowered.find(phrase)
        if idx == -1:
            continue
        start = idx + len(phrase)
        _scan(description, taxonomy, found, start, start + _PHRASE_WINDOW, in_requirement=True)


def _scan_delimited_lists(
    description: str,
    taxonomy: SkillTaxonomy,
    found: dict[str, bool],
) -> None:
    """Pick known skills out of lists like "Tech stack: React, Node.js, Redis"."""
    for pattern in _LIST_PATTERNS:
        for match in pattern.finditer(description):
            for item in _LIST_SEPARATORS.split(match.group(1)):
                cleaned = taxonomy.clean(item)
                if (
                    len(cleaned) <= _MAX_LIST_ITEM_LENGTH
                    and taxonomy.is_valid_skill_name(cleaned)
                    and taxonomy.is_known(cleaned)
                ):
                    _add_candidate(cleaned, taxonomy, found)


def extract_skills(
    description: str,
    taxonomy: SkillTaxonomy | None = None,
) -> list[str]:
    """Extract canonical skill names from a job description.

    Deduplicated, in order of first discovery. Empty or non-string input
    returns an empty list.

    Names that double as English words (Go, Less, Swift ...) only count with
    their product casing, which a capitalized sentence opener also has. Such
    a sentence-initial hit is kept only when the description names at least
    one other skill, or when it sits right after a requirement phrase.
    """
    if not description or not isinstance(description, str):
        return []
    taxonomy = taxonomy or get_taxonomy()

    found: dict[str, bool] = {}
    _scan(description, taxonomy, found)
    _scan_requirement_windows(description, taxonomy, found)
    _scan_delimited_lists(description, taxonomy, found)

    found = {s: confirmed for s, confirmed in found.items() if len(s) > 1}
    skills = list(found) if any(found.values()) else []
    logger.debug("Extracted %d skills from description (%d chars)", len(skills), len(description))
    return skills


def extract_skills_with_experience(
    description: str,
    taxonomy: SkillTaxonomy | None = None,
) -> list[SkillExperience]:
    """Find skills paired with a years-of-experience requirement.

    Years outside 1-20 are treated as noise. When a skill is mentioned with
    several requirements the largest one is kept.
    """
    if not description or not isinstance(description, str):
        return []
    taxonomy = taxonomy or get_taxonomy()

    years_by_skill: dict[str, int] = {}
    for pattern in _EXPERIENCE_PATTERNS:
        for match in pattern.finditer(description):
            years = int(match.group(1))
            skill_text = match.group(2).strip()
            if years <= 0 or years > _MAX_PLAUSIBLE_YEARS or not skill_text:
                continue
            found: dict[str, bool] = {}
            _scan(skill_text, taxonomy, found, in_requirement=True)
            for skill in (s for s in found if len(s) > 1):
                if years > years_by_skill.get(skill, 0):
                    years_by_skill[skill] = years

    return [
        SkillExperience(skill=skill, years_required=years)
        for skill, years in years_by_skill.items()
    ]


def score_richness(
    description: str,
    taxonomy: SkillTaxonomy | None = None,
) -> int:
    """Score 0-100 for how many distinct technical skills a description names.

    0 skills -> 0, 1-2 -> up to 30, 3-5 -> up to 60, 6+ -> up to 100.
    """
    count = len(set(extract_skills(description, taxonomy)))
    if count == 0:
        return 0
    if count <= 2:
        return min(30, count * 15)
    if count <= 5:
        return min(60, 30 + (count - 2) * 10)
    return min(100, 60 + (count - 5) * 8)


def categorize_skills(
    description: str,
    taxonomy: SkillTaxonomy | None = None,
) -> dict[str, list[str]]:
    """Group extracted skills by category; unmapped skills land in ``other``."""
    categories: dict[str, list[str]] = {name: [] for name in CATEGORY_NAMES}
    lookup: dict[str, str] = {}
    for category, skills in SKILL_CATEGORIES.items():
        for skill in skills:
            lookup.setdefault(skill.lower(), category)

    for skill in extract_skills(description, taxonomy):
        categories[lookup.get(skill.lower(), "other")].append(skill)
    return categories
