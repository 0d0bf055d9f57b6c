"""Sample campus directory used for local development and demos."""

import logging

from sqlalchemy.orm import Session

from app.schemas.category import CategoryCreate
from app.schemas.service import ServiceCreate
from app.services.directory_manager import CategoryManager, ServiceManager

logger = logging.getLogger(__name__)

SAMPLE_DIRECTORY = [
    {
        "name": "North Campus",
        "type": "campus",
        "icon": "🏫",
        "description": "Main teaching campus",
        "featured": True,
        "sections": [
            {
                "name": "Library",
                "icon": "📚",
                "services": [
                    {
                        "title": "Room booking",
                        "description": "Reserve group study rooms",
                        "tags": ["study", "rooms"],
                        "href": "https://example.com/library/rooms",
                    },
                    {
                        "title": "Catalogue search",
                        "description": "Find books and journals",
                        "tags": ["books"],
                        "href": "https://example.com/library/catalogue",
                    },
                ],
            },
            {
                "name": "Dining",
                "icon": "🍜",
                "services": [
                    {
                        "title": "Canteen menu",
                        "description": "Daily menus for all canteens",
                        "tags": ["food"],
                        "status": "coming-soon",
                    },
                ],
            },
        ],
    },
    {
        "name": "South Campus",
        "type": "campus",
        "icon": "🏛️",
        "description": "Research and graduate campus",
        "sections": [
            {
                "name": "Student Center",
                "icon": "🎫",
                "services": [
                    {
                        "title": "Club directory",
                        "description": "Student clubs and societies",
                        "tags": ["clubs"],
                        "href": "https://example.com/clubs",
                    },
                ],
            },
        ],
    },
    {
        "name": "Study Tools",
        "type": "general",
        "icon": "🎓",
        "description": "Tools for learning, on any campus",
        "featured": True,
        "services": [
            {
                "title": "AI productivity guide",
                "description": "Notes on using AI tools to study efficiently",
                "tags": ["AI"],
                "href": "https://example.com/ai-guide",
                "featured": True,
            },
        ],
    },
]


def _add_services(services: ServiceManager, category_id: str, entries) -> int:
    for order, entry in enumerate(entries):
        services.create(
            ServiceCreate(category_id=category_id, sort_order=order, **entry)
        )
    return len(entries)


def seed_directory(db: Session) -> bool:
    """
    Insert the sample directory through the validated write path.

    Returns False without writing anything when categories already exist.
    """
    categories = CategoryManager(db)
    services = ServiceManager(db)

    if categories.list():
        logger.info("Directory already has categories, skipping sample data")
        return False

    service_count = 0
    for root_order, root in enumerate(SAMPLE_DIRECTORY):
        root_fields = {
            k: v for k, v in root.items() if k not in ("sections", "services")
        }
        parent = categories.create(CategoryCreate(sort_order=root_order, **root_fields))
        service_count += _add_services(services, parent.id, root.get("services", []))

        for section_order, section in enumerate(root.get("sections", [])):
            section_fields = {k: v for k, v in section.items() if k != "services"}
            child = categories.create(
                CategoryCreate(
                    type="section",
                    parent_id=parent.id,
                    sort_order=section_order,
                    **section_fields,
                )
            )
            service_count += _add_services(services, child.id, section["services"])

    logger.info(f"Seeded sample directory with {service_count} services")
    return True
