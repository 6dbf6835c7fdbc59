"""
Requirement document loading.

This module turns a declarative JSON requirement document into a basket
tree. Documents can live on disk or behind an HTTP(S) URL, and are cached
per source so repeated audits do not re-read them.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import (
    DEFAULT_CREDITS,
    HTTP_BACKOFF_FACTOR,
    HTTP_RETRIES,
    HTTP_RETRY_STATUSES,
    HTTP_TIMEOUT,
    REQUIREMENTS_DIR,
)
from ..engines import Basket, ModuleBasket, factory
from ..exceptions import BasketConstructionError, InvalidCourseError, RequirementConfigError
from ..models import BasketState, BasketStateStore, CourseRecord

logger = logging.getLogger(__name__)


def create_retry_session() -> requests.Session:
    """HTTP session that retries rate-limited and failed GETs with backoff."""
    session = requests.Session()
    retries = Retry(
        total=HTTP_RETRIES,
        backoff_factor=HTTP_BACKOFF_FACTOR,
        status_forcelist=HTTP_RETRY_STATUSES,
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


@dataclass
class RequirementTree:
    """
    A built requirement tree and everything it owns.

    Attributes:
        name: Degree or programme name from the document
        root: Root basket
        states: Named BasketStates referenced by "scope" nodes
        catalog: CourseRecords created for single-course requirements, by code
    """
    name: str
    root: Basket
    states: BasketStateStore = field(default_factory=BasketStateStore)
    catalog: dict = field(default_factory=dict)


class RequirementLoader:
    """
    Loads requirement documents and builds basket trees from them.

    DOCUMENT SHAPE:
    ---------------
        {
            "name": "Applied Mathematics",
            "credits": {"MA4199": 12},            # optional, default 4
            "states": {"lists": ["MA2101"]},      # optional pre-claimed codes
            "requirement": NODE
        }

    A NODE is one of:
        "CS2103T"                                           single course
        {"module": {"code": "CS2103T", "credits": 4}}       single course
        {"module": {"code_pattern": "^CS3"}}                same as "modules"
        {"modules": {"prefixes": ["CS"], "levels": [3],
                     "required_credits": 20}}               bulk requirement
        {"and": [NODE, ...]}   {"or": [NODE, ...]}
        {"at_least": {"n": 2, "of": [NODE, ...], "strict": false}}
        {"at_least_credits": {"credits": 24, "of": NODE}}
        {"at_least_modules": {"count": 3, "of": NODE}}
        {"scope": {"state": "lists", "of": NODE}}           no double counting
        {"Level 1000": NODE}                                titled node

    Every reference builds a new basket, so the same course or group may
    appear in several places of the document.

    Usage:
        loader = RequirementLoader()
        tree = loader.load("requirements/cs.json")
        tree = loader.load("applied_mathematics")     # bundled in data/requirements
    """

    def __init__(self, session: requests.Session = None):
        self._session = session
        self._documents = {}  # Keyed by source path or URL

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = create_retry_session()
        return self._session

    def load(self, source) -> RequirementTree:
        """Load a document (path or URL) and build a fresh tree from it."""
        return self.build(self.load_document(source))

    def load_document(self, source) -> dict:
        source = str(source)
        if source not in self._documents:
            if source.startswith(("http://", "https://")):
                document = self._fetch(source)
            else:
                document = self._read(self._resolve(source))
            if not isinstance(document, dict):
                raise RequirementConfigError("A requirement document must be a JSON object")
            logger.info(f"Loaded requirement document {document.get('name', '')!r} from {source}")
            self._documents[source] = document
        return self._documents[source]

    @staticmethod
    def _resolve(source: str) -> Path:
        path = Path(source)
        if path.exists() or path.suffix or path.parent != Path("."):
            return path
        bundled = REQUIREMENTS_DIR / f"{source}.json"
        return bundled if bundled.exists() else path

    @staticmethod
    def bundled() -> list:
        """Names of the requirement documents shipped in the data directory."""
        if not REQUIREMENTS_DIR.is_dir():
            return []
        return sorted(path.stem for path in REQUIREMENTS_DIR.glob("*.json"))

    def _read(self, path: Path) -> dict:
        try:
            with open(path, "r") as f:
                return json.load(f)
        except OSError as exc:
            raise RequirementConfigError(f"Could not read requirements from {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise RequirementConfigError(f"Requirements file {path} is not valid JSON: {exc}") from exc

    def _fetch(self, url: str) -> dict:
        try:
            response = self.session.get(url, timeout=HTTP_TIMEOUT)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise RequirementConfigError(f"Could not fetch requirements from {url}: {exc}") from exc
        except ValueError as exc:
            raise RequirementConfigError(f"Requirements at {url} are not valid JSON: {exc}") from exc

    def build(self, document: dict) -> RequirementTree:
        """Build a requirement tree from an already-parsed document."""
        if "requirement" not in document:
            raise RequirementConfigError("Missing 'requirement'")

        builder = _TreeBuilder(document.get("credits", {}))
        builder.seed_states(document.get("states", {}))

        root = builder.node(document["requirement"], "$.requirement")
        tree = RequirementTree(
            name=document.get("name", root.title),
            root=root,
            states=builder.states,
            catalog=builder.catalog,
        )
        logger.debug(f"Built {tree.name!r}: {len(tree.catalog)} courses, {len(tree.states)} shared states")
        return tree


class _TreeBuilder:
    """Converts one document's NODEs into baskets, tracking the JSON path for errors."""

    OPERATORS = (
        "module", "modules", "and", "or", "at_least",
        "at_least_credits", "at_least_modules", "scope",
    )
    MODULES_KEYS = {"pattern", "prefixes", "suffixes", "levels", "required_credits", "early_terminate"}

    def __init__(self, credits: dict):
        if not isinstance(credits, dict):
            raise RequirementConfigError("'credits' must map course codes to credit weights", "$.credits")
        self.credits = credits
        self.catalog = {}
        self.states = BasketStateStore()

    def seed_states(self, states) -> None:
        """Pre-claim codes from the document's "states" table."""
        if not isinstance(states, dict):
            raise RequirementConfigError("'states' must map state names to lists of course codes", "$.states")
        for key, codes in states.items():
            path = f"$.states[{key!r}]"
            state = self.states.get(key)
            for code in self._strings(codes, "codes", path):
                state.claim(code)

    @staticmethod
    def _strings(value, name: str, path: str) -> list:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise RequirementConfigError(f"{name!r} must be a list of strings, got {value!r}", path)
        return value

    @staticmethod
    def _level(value, path: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise RequirementConfigError(f"Levels must be integers, got {value!r}", path)
        return value

    def node(self, entry, path: str, title: str = "") -> Basket:
        if isinstance(entry, str):
            return self._build_module({"code": entry}, path, title)
        if not isinstance(entry, dict) or len(entry) != 1:
            raise RequirementConfigError("Expected a course code or an object with exactly one key", path)

        key, value = next(iter(entry.items()))
        if key in self.OPERATORS:
            return getattr(self, f"_build_{key}")(value, f"{path}.{key}", title)
        if title:
            raise RequirementConfigError(f"Unknown requirement type {key!r}", path)
        # Any other key is the title of the node it wraps
        return self.node(value, f"{path}[{key!r}]", title=key)

    def _children(self, value, path: str) -> list:
        if not isinstance(value, list):
            raise RequirementConfigError("Expected a list of requirements", path)
        return [self.node(item, f"{path}[{i}]") for i, item in enumerate(value)]

    def _field(self, value, name: str, path: str):
        if not isinstance(value, dict) or name not in value:
            raise RequirementConfigError(f"Missing {name!r}", path)
        return value[name]

    def course(self, code: str, path: str, credits=None) -> CourseRecord:
        if code not in self.catalog:
            if credits is None:
                credits = self.credits.get(code, DEFAULT_CREDITS)
            try:
                self.catalog[code] = CourseRecord(code, credits)
            except InvalidCourseError as exc:
                raise RequirementConfigError(str(exc), path) from exc
        return self.catalog[code]

    def _build_module(self, value, path: str, title: str) -> Basket:
        if not isinstance(value, dict):
            raise RequirementConfigError("Expected an object", path)
        if value.get("code"):
            return ModuleBasket(self.course(value["code"], path, value.get("credits")), title=title)

        # Pattern- and level-only modules are bulk requirements in disguise
        filters = {}
        if "code_pattern" in value:
            filters["pattern"] = value["code_pattern"]
        if "level" in value:
            filters["levels"] = [self._level(value["level"], path)]
        if not filters:
            raise RequirementConfigError("At least one module parameter must be given", path)
        return self._build_modules(filters, path, title)

    def _build_modules(self, value, path: str, title: str) -> Basket:
        if not isinstance(value, dict):
            raise RequirementConfigError("Expected an object", path)
        unknown = set(value) - self.MODULES_KEYS
        if unknown:
            raise RequirementConfigError(f"Unknown module filter(s): {', '.join(sorted(unknown))}", path)
        if "pattern" in value and not isinstance(value["pattern"], str):
            raise RequirementConfigError(f"'pattern' must be a string, got {value['pattern']!r}", path)
        for name in ("prefixes", "suffixes"):
            if name in value:
                self._strings(value[name], name, path)
        if "levels" in value:
            if not isinstance(value["levels"], list):
                raise RequirementConfigError(f"'levels' must be a list of integers, got {value['levels']!r}", path)
            for level in value["levels"]:
                self._level(level, path)
        required = value.get("required_credits")
        if required is not None and (isinstance(required, bool) or not isinstance(required, (int, float))):
            raise RequirementConfigError(f"'required_credits' must be a number, got {required!r}", path)
        if not isinstance(value.get("early_terminate", True), bool):
            raise RequirementConfigError("'early_terminate' must be true or false", path)
        try:
            return factory.modules(title=title, **value)
        except (BasketConstructionError, re.error, TypeError) as exc:
            raise RequirementConfigError(str(exc), path) from exc

    def _build_and(self, value, path: str, title: str) -> Basket:
        return factory.all_of(title, self._children(value, path))

    def _build_or(self, value, path: str, title: str) -> Basket:
        return factory.any_of(title, self._children(value, path))

    def _build_at_least(self, value, path: str, title: str) -> Basket:
        n = self._field(value, "n", path)
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise RequirementConfigError(f"'n' must be a non-negative integer, got {n!r}", path)
        children = self._children(self._field(value, "of", path), f"{path}.of")
        return factory.at_least(title, n, children, strict=bool(value.get("strict", False)))

    def _build_at_least_credits(self, value, path: str, title: str) -> Basket:
        credits = self._field(value, "credits", path)
        if isinstance(credits, bool) or not isinstance(credits, (int, float)):
            raise RequirementConfigError(f"'credits' must be a number, got {credits!r}", path)
        child = self.node(self._field(value, "of", path), f"{path}.of")
        return factory.at_least_credits(title, credits, child)

    def _build_at_least_modules(self, value, path: str, title: str) -> Basket:
        count = self._field(value, "count", path)
        if isinstance(count, bool) or not isinstance(count, int):
            raise RequirementConfigError(f"'count' must be an integer, got {count!r}", path)
        child = self.node(self._field(value, "of", path), f"{path}.of")
        return factory.at_least_modules(title, count, child)

    def _build_scope(self, value, path: str, title: str) -> Basket:
        child = self.node(self._field(value, "of", path), f"{path}.of")
        key = value.get("state")
        state = self.states.get(key) if key else BasketState()
        return factory.scoped(child, state, title=title)
