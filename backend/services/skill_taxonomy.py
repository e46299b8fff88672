"""Canonical skill vocabulary, alias resolution and fuzzy skill matching.

The alias table is built once into a read-only map so normalization is a
single dictionary lookup. Fuzzy matching on canonical forms covers variant
spellings the table does not list yet (e.g. "ReactJS" vs "React").
"""

import logging
import re
from collections.abc import Iterable
from types import MappingProxyType

from models.schemas.skill import FuzzyMatch, SkillAlias
from services.similarity import levenshtein_similarity

logger = logging.getLogger(__name__)

MAX_SKILL_NAME_LENGTH = 100
DEFAULT_FUZZY_THRESHOLD = 0.8

_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9 .#+\-]")
_WHITESPACE = re.compile(r"\s+")
_ASCII_DIGITS = re.compile(r"[0-9]+")

# ---------------------------------------------------------------------------
# Canonical name -> aliases. Lookups are case-insensitive; the canonical name
# always resolves to itself and need not be repeated in its alias list.
# ---------------------------------------------------------------------------
_ALIAS_TABLE: dict[str, tuple[str, ...]] = {
    # Languages
    "JavaScript": (
        "js", "vanilla js", "ecmascript", "es6", "es2015", "es2016", "es2017",
        "es2018", "es2019", "es2020", "es2021", "es2022",
    ),
    "TypeScript": ("ts", "type script"),
    "Python": ("python3", "python 3", "py"),
    "Java": ("java8", "java 8", "java11", "java 11", "java17", "java 17"),
    "C#": ("csharp", "c sharp", "c-sharp"),
    "C++": ("cpp", "c plus plus", "c-plus-plus"),
    "F#": ("fsharp", "f sharp"),
    ".NET": ("dotnet", ".net core", "dotnet core"),
    "VB.NET": ("vbnet", "visual basic .net"),
    "PHP": ("php7", "php 7", "php8", "php 8"),
    "Ruby": (),
    "Go": ("golang", "go-lang"),
    "Rust": ("rust-lang", "rustlang"),
    "Swift": ("swift5", "swift 5"),
    "Kotlin": ("kotlin/jvm", "kotlin jvm"),
    "Scala": (),
    "Clojure": (),
    "Erlang": (),
    "Elixir": (),
    "Haskell": (),
    "Perl": (),
    "MATLAB": (),
    "Julia": (),
    "Dart": (),
    "SAS": (),
    "Objective-C": ("objective c", "objc", "obj-c"),
    # Frontend
    "React": ("reactjs", "react.js", "react js", "react-js"),
    "Angular": (
        "angularjs", "angular.js", "angular js", "angular2", "angular 2",
        "angular4", "angular 4",
    ),
    "Vue.js": ("vue", "vuejs", "vue js", "vue-js"),
    "Svelte": ("sveltejs", "sveltekit"),
    "Ember.js": ("ember", "emberjs"),
    "Backbone.js": ("backbone", "backbonejs"),
    "jQuery": (),
    "Bootstrap": ("bootstrap4", "bootstrap 4", "bootstrap5", "bootstrap 5"),
    "TailwindCSS": ("tailwind", "tailwind css", "tailwind-css"),
    "Material-UI": ("material ui", "materialui", "mui"),
    "Ant Design": ("antd",),
    "Chakra UI": ("chakra", "chakra-ui"),
    "Redux": ("redux toolkit", "redux-toolkit", "rtk"),
    "Next.js": ("nextjs", "next js", "next-js"),
    "Gatsby": ("gatsbyjs",),
    "HTML": ("html5", "html 5"),
    "CSS": ("css3", "css 3"),
    # Backend
    "Node.js": ("nodejs", "node js", "node-js", "node"),
    "Express.js": ("express", "expressjs", "express js", "express-js"),
    "Django": (),
    "Flask": (),
    "FastAPI": ("fast api",),
    "Spring": ("spring boot", "springboot", "spring framework"),
    "Laravel": (),
    "Ruby on Rails": ("rails", "ror"),
    "ASP.NET": ("asp.net core", "aspnet"),
    "Phoenix": (),
    "Koa": ("koajs", "koa.js"),
    "Fastify": (),
    "NestJS": ("nest.js", "nest js"),
    # Databases
    "SQL": ("structured query language",),
    "NoSQL": ("no sql",),
    "MySQL": ("my sql",),
    "PostgreSQL": ("postgres", "postgre", "psql"),
    "MongoDB": ("mongo", "mongo db"),
    "Redis": ("redis cache", "redis-cache"),
    "SQLite": ("sqlite3",),
    "Oracle": ("oracle db", "oracle database", "oracle sql"),
    "SQL Server": ("mssql", "ms sql", "microsoft sql server"),
    "MariaDB": (),
    "CouchDB": (),
    "Cassandra": ("apache cassandra",),
    "DynamoDB": ("dynamo", "dynamo db"),
    "Neo4j": (),
    "InfluxDB": (),
    "Elasticsearch": ("elastic search",),
    # Cloud
    "AWS": ("amazon web services", "amazon aws", "aws cloud"),
    "Azure": ("microsoft azure",),
    "Google Cloud": ("gcp", "google cloud platform"),
    "DigitalOcean": ("digital ocean",),
    "Heroku": (),
    "Vercel": (),
    "Netlify": (),
    "Firebase": (),
    "Supabase": (),
    # DevOps
    "Docker": ("docker-compose", "docker compose", "containerization"),
    "Kubernetes": ("k8s", "k8", "kube"),
    "Jenkins": (),
    "GitLab CI": ("gitlab-ci", "gitlab cicd"),
    "GitHub Actions": ("gh actions", "github action"),
    "Travis CI": ("travis", "travisci"),
    "CircleCI": ("circle ci",),
    "Ansible": (),
    "Terraform": (),
    "Vagrant": (),
    "Nginx": (),
    "Linux": (),
    "CI/CD": (
        "cicd", "ci cd", "continuous integration", "continuous delivery",
        "continuous deployment",
    ),
    # Version control
    "Git": ("github", "gitlab", "bitbucket", "version control"),
    "SVN": ("subversion",),
    "Mercurial": ("hg",),
    # Testing
    "Testing": ("unit testing", "integration testing", "automated testing"),
    "Jest": (),
    "Mocha": (),
    "Cypress": (),
    "Selenium": ("selenium webdriver",),
    "Puppeteer": (),
    "Playwright": (),
    "JUnit": ("junit5", "junit 5"),
    "pytest": ("py.test",),
    "RSpec": (),
    "PHPUnit": (),
    # Mobile
    "React Native": ("react-native",),
    "Flutter": (),
    "Xamarin": (),
    "Ionic": (),
    "Cordova": ("apache cordova", "phonegap"),
    # Data / ML
    "Machine Learning": ("ml", "machine-learning"),
    "Data Science": ("data analysis", "data analytics"),
    "TensorFlow": ("tensor flow",),
    "PyTorch": ("torch",),
    "Pandas": (),
    "NumPy": (),
    "scikit-learn": ("sklearn", "scikit learn"),
    "Keras": (),
    "OpenCV": (),
    "Matplotlib": (),
    "Seaborn": (),
    "Jupyter": ("jupyter notebook", "jupyter notebooks"),
    "Spark": ("apache spark", "pyspark"),
    "Hadoop": ("apache hadoop",),
    # Design
    "Sass": ("scss", "sass/scss"),
    "Less": ("less css",),
    "Stylus": (),
    "PostCSS": (),
    "Figma": (),
    "Sketch": (),
    "Adobe XD": ("xd",),
    "Photoshop": ("adobe photoshop",),
    "Illustrator": ("adobe illustrator",),
    # Protocols and formats
    "REST API": ("rest", "restful", "restful api", "rest apis", "api development"),
    "GraphQL": ("graph ql", "apollo graphql"),
    "SOAP": (),
    "gRPC": (),
    "WebSocket": ("websockets", "web sockets"),
    "JSON": (),
    "XML": (),
    "YAML": ("yml",),
    # Methodologies
    "Agile": ("agile methodology", "agile development"),
    "Scrum": (),
    "Kanban": (),
    "DevOps": (),
    "TDD": ("test driven development", "test-driven development"),
    "BDD": ("behavior driven development", "behaviour driven development"),
    "MVC": (),
    "MVVM": (),
    "Microservices": ("microservice", "micro services", "microservice architecture"),
    "Serverless": (),
    "JAMstack": (),
}

SKILL_ALIASES: tuple[SkillAlias, ...] = tuple(
    SkillAlias(canonical=canonical, aliases=aliases)
    for canonical, aliases in _ALIAS_TABLE.items()
)


def _lookup_key(name: str) -> str:
    return _WHITESPACE.sub(" ", name).strip().lower()


class SkillTaxonomy:
    """Read-only skill vocabulary with O(1) alias resolution."""

    def __init__(self, aliases: Iterable[SkillAlias] = SKILL_ALIASES) -> None:
        entries = tuple(aliases)
        table: dict[str, str] = {}
        families: dict[str, tuple[str, ...]] = {}

        for entry in entries:
            canonical_key = _lookup_key(entry.canonical)
            if not canonical_key:
                raise ValueError("Canonical skill name must not be empty")
            if canonical_key in families:
                raise ValueError(f"Duplicate canonical skill name: {entry.canonical!r}")
            families[canonical_key] = (entry.canonical, *entry.aliases)

        for entry in entries:
            for name in (entry.canonical, *entry.aliases):
                key = _lookup_key(name)
                owner = table.get(key)
                if owner is not None and owner != entry.canonical:
                    raise ValueError(
                        f"Alias {name!r} maps to both {owner!r} and {entry.canonical!r}"
                    )
                table[key] = entry.canonical

        self._table = MappingProxyType(table)
        self._families = MappingProxyType(families)
        logger.debug(
            "Skill taxonomy built: %d canonical skills, %d lookup keys",
            len(families), len(table),
        )

    @property
    def canonical_names(self) -> list[str]:
        return [family[0] for family in self._families.values()]

    # -- normalization -----------------------------------------------------

    def normalize(self, name: str) -> str:
        """Resolve a skill name to its canonical form.

        Unknown names come back cleaned but otherwise unchanged. Never raises.
        """
        if not isinstance(name, str):
            return ""
        hit = self._table.get(_lookup_key(name))
        if hit is not None:
            return hit
        cleaned = self.clean(name)
        return self._table.get(cleaned.lower(), cleaned)

    def is_known(self, name: str) -> bool:
        if not isinstance(name, str):
            return False
        return (
            _lookup_key(name) in self._table
            or self.clean(name).lower() in self._table
        )

    def aliases_for(self, name: str) -> list[str]:
        """All spellings (canonical first) of the family ``name`` belongs to."""
        canonical = self.normalize(name)
        family = self._families.get(canonical.lower())
        if family is None:
            return [name] if isinstance(name, str) else []
        return list(family)

    # -- matching ----------------------------------------------------------

    @staticmethod
    def similarity(text_a: str, text_b: str) -> float:
        return levenshtein_similarity(text_a, text_b)

    def fuzzy_match(
        self,
        user_skill: str,
        role_skill: str,
        threshold: float = DEFAULT_FUZZY_THRESHOLD,
    ) -> FuzzyMatch:
        user_canonical = self.normalize(user_skill)
        role_canonical = self.normalize(role_skill)

        if user_canonical.lower() == role_canonical.lower():
            return FuzzyMatch(
                matched=True,
                confidence=1.0,
                user_canonical=user_canonical,
                role_canonical=role_canonical,
            )

        confidence = self.similarity(user_canonical.lower(), role_canonical.lower())
        return FuzzyMatch(
            matched=confidence >= threshold,
            confidence=confidence,
            user_canonical=user_canonical,
            role_canonical=role_canonical,
        )

    # -- validation --------------------------------------------------------

    @staticmethod
    def is_valid_skill_name(name: str) -> bool:
        if not isinstance(name, str):
            return False
        stripped = name.strip()
        return (
            0 < len(stripped) <= MAX_SKILL_NAME_LENGTH
            and not _ASCII_DIGITS.fullmatch(stripped)
        )

    @staticmethod
    def clean(name: str) -> str:
        """Strip unusual characters and collapse whitespace."""
        if not isinstance(name, str):
            return ""
        collapsed = _WHITESPACE.sub(" ", name)
        return _WHITESPACE.sub(" ", _DISALLOWED_CHARS.sub("", collapsed)).strip()


# Process-wide default, built on first use and never mutated afterwards
_default_taxonomy: SkillTaxonomy | None = None


def get_taxonomy() -> SkillTaxonomy:
    """Return the shared default taxonomy, building it on first call."""
    global _default_taxonomy
    if _default_taxonomy is None:
        _default_taxonomy = SkillTaxonomy()
    return _default_taxonomy


def normalize_skill_name(name: str) -> str:
    return get_taxonomy().normalize(name)


def fuzzy_match_skills(
    user_skill: str,
    role_skill: str,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> FuzzyMatch:
    return get_taxonomy().fuzzy_match(user_skill, role_skill, threshold)


def skill_similarity(text_a: str, text_b: str) -> float:
    return SkillTaxonomy.similarity(text_a, text_b)


is_valid_skill_name = SkillTaxonomy.is_valid_skill_name
clean_skill_name = SkillTaxonomy.clean
