"""
Portfolio projects shown on the home and portfolio pages.

Projects change rarely, so they live here as data rather than in the
database. Set ``featured=True`` to show a project on the home page.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Project:
    id: int
    slug: str
    title: str
    category: str
    tagline: str
    short_description: str
    full_description: str
    cover_image: str
    year: str
    featured: bool = False
    duration: str = ""
    size: str = "small"
    images: tuple[str, ...] = ()
    crew: dict = field(default_factory=dict)
    keywords: tuple[str, ...] = ()


PROJECTS = (
    Project(
        id=1,
        slug="taraharu",
        title="Taraharu",
        category="Feature Film",
        tagline="A Journey Through Stars and Emotions",
        short_description="A cinematic journey showcasing emotion and storytelling",
        full_description=(
            "Taraharu is a groundbreaking Nepali feature film that weaves together powerful "
            "storytelling with breathtaking cinematography. This emotional journey explores the "
            "complexities of human relationships, dreams, and the pursuit of happiness against "
            "the backdrop of Nepal's stunning landscapes. The film combines traditional Nepali "
            "cultural elements with contemporary filmmaking techniques, creating a unique "
            "cinematic experience that resonates with audiences across generations."
        ),
        cover_image="studio/img/taraharu.jpeg",
        images=("studio/img/taraharu.jpeg",),
        year="2023",
        duration="2h 15min",
        featured=True,
        size="large",
        crew={"director": "Ways Creative Team", "producer": "Ways Private Limited"},
        keywords=(
            "Nepali movie Taraharu",
            "Nepali feature film production",
            "Nepal cinema",
            "contemporary Nepali cinema",
        ),
    ),
    Project(
        id=2,
        slug="kaancho-dhaago",
        title="Kaancho Dhaago",
        category="Theatre",
        tagline="The Golden Thread of Life",
        short_description="Theatrical masterpiece exploring inner emotions",
        full_description=(
            "Kaancho Dhaago (The Golden Thread) is a theatrical production that delves into the "
            "human psyche, exploring connection, identity, and the invisible bonds that tie us "
            "together. The stage performance combines traditional Nepali theatre techniques with "
            "modern dramatic elements, examining the delicate threads connecting family, society, "
            "and self."
        ),
        cover_image="studio/img/kaancho-dhaago.jpg",
        images=("studio/img/kaancho-dhaago.jpg",),
        year="2022",
        duration="1h 45min",
        featured=True,
        size="medium",
        crew={"director": "Ways Theatre Collective", "producer": "Ways Private Limited"},
        keywords=(
            "Nepali theatre production",
            "Kaancho Dhaago play",
            "Nepal stage performance",
        ),
    ),
    Project(
        id=3,
        slug="sath-sathi-aaideuna",
        title="Sathi Sathi Aaideuna",
        category="Theatre",
        tagline="Come Together, Friends",
        short_description="Life lessons through powerful performances",
        full_description=(
            "Sathi Sathi Aaideuna is an uplifting theatrical experience that celebrates "
            "friendship, community, and the power of human connection. A diverse ensemble cast "
            "tells interconnected stories of companionship and loyalty, blending comedy, drama "
            "and music into a reminder of the transformative power of togetherness."
        ),
        cover_image="studio/img/sathi-sathi-aaideuna.jpg",
        images=("studio/img/sathi-sathi-aaideuna.jpg",),
        year="2021",
        duration="1h 30min",
        featured=True,
        size="medium",
        crew={"director": "Ways Theatre Collective", "producer": "Ways Private Limited"},
        keywords=(
            "Nepali theatre Sathi Sathi Aaideuna",
            "friendship themed play Nepal",
            "community theatre Nepal",
        ),
    ),
    Project(
        id=4,
        slug="dhalkeko-saalaijo",
        title="Dhalkeko Saalaijo",
        category="Theatre",
        tagline="The Fallen Match",
        short_description="Universal storytelling for all audiences",
        full_description=(
            "Dhalkeko Saalaijo uses the metaphor of a fallen matchstick to explore hope, "
            "resilience, and rebirth. The performance combines physical theatre, spoken word, "
            "and visual storytelling into a multi-sensory experience that transcends language."
        ),
        cover_image="studio/img/dhalkeko-saalaijo.jpg",
        images=("studio/img/dhalkeko-saalaijo.jpg",),
        year="2020",
        duration="1h 20min",
        featured=True,
        crew={"director": "Ways Theatre Collective", "producer": "Ways Private Limited"},
        keywords=(
            "Nepali theatre Dhalkeko Saalaijo",
            "physical theatre Nepal",
        ),
    ),
    Project(
        id=5,
        slug="bullet-and-the-buddha",
        title="Bullet and the Buddha",
        category="Theatre",
        tagline="When Violence Meets Peace",
        short_description="Contrasting philosophies in dramatic form",
        full_description=(
            "Bullet and the Buddha is a theatrical exploration of conflicting ideologies, the "
            "path of violence against the way of peace. Set against Nepal's own journey from "
            "conflict to peace, the play asks what justice, revenge and forgiveness cost."
        ),
        cover_image="studio/img/bullet-and-the-buddha.jpg",
        images=("studio/img/bullet-and-the-buddha.jpg",),
        year="2019",
        duration="1h 50min",
        featured=True,
        crew={"director": "Ways Theatre Collective", "producer": "Ways Private Limited"},
        keywords=(
            "Bullet and the Buddha play",
            "philosophical theatre Nepal",
        ),
    ),
    Project(
        id=6,
        slug="katha-express",
        title="Katha Express",
        category="Theatre",
        tagline="Stories That Move and Inspire",
        short_description="Stories that move and inspire",
        full_description=(
            "Katha Express is an anthology-style production that stops, like an express train, "
            "at a series of interconnected stories from urban struggles to rural wisdom. It "
            "celebrates Nepal's oral storytelling tradition with modern theatrical technique."
        ),
        cover_image="studio/img/katha-express.jpg",
        images=("studio/img/katha-express.jpg",),
        year="2021",
        duration="2h 00min",
        featured=True,
        crew={"director": "Ways Theatre Collective", "producer": "Ways Private Limited"},
        keywords=(
            "Katha Express theatre Nepal",
            "anthology play Nepal",
        ),
    ),
)


def get_all_projects() -> tuple[Project, ...]:
    return PROJECTS


def get_featured_projects() -> list[Project]:
    return [project for project in PROJECTS if project.featured]


def get_project_by_slug(slug: str) -> Project | None:
    return next((project for project in PROJECTS if project.slug == slug), None)


def get_projects_by_category(category: str) -> list[Project]:
    return [project for project in PROJECTS if project.category == category]
