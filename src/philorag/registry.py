"""Catalog of primary-source works available for indexing."""

from collections.abc import Iterable, Iterator

from philorag.models import TextSource

GUTENBERG = "https://www.gutenberg.org/cache/epub"


def _gutenberg(book: int) -> str:
    return f"{GUTENBERG}/{book}/pg{book}.txt"


DEFAULT_SOURCES: tuple[TextSource, ...] = (
    # Aristotle
    TextSource(
        id="aristotle-nicomachean-ethics",
        title="Nicomachean Ethics",
        author="Aristotle",
        philosopher="aristotle",
        url=_gutenberg(8438),
        description="Foundational work on virtue ethics and human flourishing",
    ),
    TextSource(
        id="aristotle-politics",
        title="Politics",
        author="Aristotle",
        philosopher="aristotle",
        url=_gutenberg(6762),
        description="Treatise on political philosophy and the ideal state",
    ),
    TextSource(
        id="aristotle-poetics",
        title="Poetics",
        author="Aristotle",
        philosopher="aristotle",
        url=_gutenberg(1974),
        description="Work on dramatic theory and literary criticism",
    ),
    TextSource(
        id="aristotle-athenian-constitution",
        title="The Athenian Constitution",
        author="Aristotle",
        philosopher="aristotle",
        url=_gutenberg(26095),
        description="Analysis of Athenian political institutions",
    ),
    # Plato
    TextSource(
        id="plato-republic",
        title="The Republic",
        author="Plato",
        philosopher="plato",
        url=_gutenberg(1497),
        description="Justice, the ideal state, and the philosopher-king",
    ),
    TextSource(
        id="plato-symposium",
        title="Symposium",
        author="Plato",
        philosopher="plato",
        url=_gutenberg(1600),
        description="Dialogue on the nature of love",
    ),
    TextSource(
        id="plato-phaedo",
        title="Phaedo",
        author="Plato",
        philosopher="plato",
        url=_gutenberg(1658),
        description="On the immortality of the soul and the death of Socrates",
    ),
    TextSource(
        id="plato-apology",
        title="Apology",
        author="Plato",
        philosopher="plato",
        url=_gutenberg(1656),
        description="Socrates' defence at his trial",
    ),
    # Socrates (through Xenophon)
    TextSource(
        id="xenophon-memorabilia",
        title="Memorabilia",
        author="Xenophon",
        philosopher="socrates",
        url=_gutenberg(1177),
        description="Xenophon's recollections of Socrates",
    ),
    # Stoics
    TextSource(
        id="aurelius-meditations",
        title="Meditations",
        author="Marcus Aurelius",
        philosopher="marcusAurelius",
        url=_gutenberg(2680),
        description="Personal writings on Stoic philosophy",
    ),
    TextSource(
        id="epictetus-discourses",
        title="Discourses and Enchiridion",
        author="Epictetus",
        philosopher="epictetus",
        url="https://www.gutenberg.org/ebooks/10661.txt.utf-8",
        description="Stoic teachings on living a good life",
    ),
    TextSource(
        id="seneca-shortness-life",
        title="On the Shortness of Life",
        author="Seneca",
        philosopher="seneca",
        url="https://www.gutenberg.org/ebooks/64576.txt.utf-8",
        description="Essay on the proper use of time",
    ),
    # Christian
    TextSource(
        id="augustine-confessions",
        title="Confessions",
        author="Augustine of Hippo",
        philosopher="augustine",
        url=_gutenberg(3296),
        description="Spiritual autobiography",
    ),
    TextSource(
        id="augustine-city-of-god",
        title="City of God",
        author="Augustine of Hippo",
        philosopher="augustine",
        url=_gutenberg(45304),
        description="Masterwork on Christianity and society",
    ),
    TextSource(
        id="aquinas-summa-part1",
        title="Summa Theologica - Part I (Prima Pars)",
        author="Thomas Aquinas",
        philosopher="thomasAquinas",
        url=_gutenberg(17611),
        description="On God and creation",
    ),
    TextSource(
        id="aquinas-summa-part1-2",
        title="Summa Theologica - Part I-II (Prima Secundae)",
        author="Thomas Aquinas",
        philosopher="thomasAquinas",
        url=_gutenberg(17897),
        description="On human acts and virtues",
    ),
)


class SourceRegistry:
    """Lookup over a fixed set of text sources.

    Example:
        registry = SourceRegistry.default()
        ethics = registry.get("aristotle-nicomachean-ethics")
        platonic = registry.by_philosopher("plato")
    """

    def __init__(self, sources: Iterable[TextSource] = ()) -> None:
        """Initialize the registry.

        Raises:
            ValueError: If two sources share an id
        """
        self._sources: dict[str, TextSource] = {}
        for source in sources:
            self.register(source)

    def register(self, source: TextSource) -> None:
        """Add a source. Ids must be unique."""
        if source.id in self._sources:
            raise ValueError(f"Duplicate source id: {source.id}")
        self._sources[source.id] = source

    def get(self, source_id: str) -> TextSource | None:
        """Look up a source by id."""
        return self._sources.get(source_id)

    def by_philosopher(self, philosopher: str) -> list[TextSource]:
        """All sources attributed to a philosopher, in catalog order."""
        return [s for s in self._sources.values() if s.philosopher == philosopher]

    def philosophers(self) -> list[str]:
        """Distinct philosophers with at least one source, in catalog order."""
        return list(dict.fromkeys(s.philosopher for s in self._sources.values()))

    def all(self) -> list[TextSource]:
        return list(self._sources.values())

    def with_sources(self, extra: Iterable[TextSource]) -> "SourceRegistry":
        """A new registry holding these sources followed by extra."""
        return SourceRegistry([*self._sources.values(), *extra])

    def __iter__(self) -> Iterator[TextSource]:
        return iter(self._sources.values())

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._sources

    @classmethod
    def default(cls) -> "SourceRegistry":
        """Create a registry with the built-in catalog."""
        return cls(DEFAULT_SOURCES)
