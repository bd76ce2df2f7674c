import logging
from sqlalchemy.orm import Session
from banquet_booking.config import settings
from banquet_booking.models.hall import BanquetHall, HallEquipment
from banquet_booking.models.user import User, UserRole
from banquet_booking.utils.auth import get_password_hash

logger = logging.getLogger(__name__)

BANQUET_HALLS = [
    {
        "name": "Ivory Banquet Hall",
        "capacity": 150,
        "details": (
            "Every celebration must overflow with grandeur and outstanding services. Our Ivory banquet is "
            "the perfect venue for your special gatherings and get-togethers, so every memory created is "
            "an everlasting one."
        ),
        "images": [
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Ivory-Hall-1.jpg",
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Ivory-Hall-4.jpg",
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Ivory-Hall-3.jpg",
        ],
        "equipment": [
            ("Projector", "AV", "Excellent", 2),
            ("Sound System", "AV", "Excellent", 2),
            ("Podium", "AV", "Good", 1),
            ("Stage Lighting", "Lighting", "Good", 1),
            ("LED Wall", "AV", "Excellent", 4),
            ("AC", "HVAC", "Excellent", 4),
        ],
    },
    {
        "name": "Ebony Banquet Hall",
        "capacity": 300,
        "details": (
            "When luxury meets celebration, it creates moments of blissful eternity. Our Ebony banquet is "
            "best suited for grand soirees, formal meet-ups or any large gatherings."
        ),
        "images": [
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Ebony-Hall-2.jpg",
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Ebony-Hall-4.jpg",
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Ebony-Hall-3.jpg",
        ],
        "equipment": [
            ("Podium", "AV", "Good", 1),
            ("Stage Lighting", "AV", "Good", 4),
            ("Sound System", "AV", "Good", 2),
            ("Projector", "AV", "Good", 2),
            ("Whiteboard", "AV", "Good", 2),
            ("AC", "HVAC", "Good", 2),
        ],
    },
    {
        "name": "Pearl Banquet Hall",
        "capacity": 40,
        "details": "Elegant and intimate banquet hall perfect for smaller gatherings and corporate events.",
        "images": [
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Pearl-Hall-5.jpg",
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Pearl-Hall-4.jpg",
            "https://www.nativehotels.co.in/wp-content/uploads/2024/09/Pearl-Hall-3.jpg",
        ],
        "equipment": [
            ("Chandeliers", "Lighting", "Excellent", 2),
            ("Podium", "Staging", "Excellent", 1),
            ("Projector", "AV", "Good", 2),
            ("AC", "HVAC", "Excellent", 4),
            ("LED TVs", "AV", "Excellent", 2),
            ("Microphone", "AV", "Good", 4),
        ],
    },
    {
        "name": "Sapphire Banquet Hall",
        "capacity": 220,
        "details": "Modern banquet hall with modular seating and breakout areas.",
        "images": [
            "https://www.theparkhotels.com/images/site-specific/corporate-site/banquets/banquets-banner.jpg",
        ],
        "equipment": [
            ("Projector", "AV", "Good", 1),
            ("Sound System", "AV", "Good", 1),
            ("Podium", "Staging", "Good", 1),
            ("Microphone", "AV", "Good", 2),
        ],
    },
    {
        "name": "Opal Conference & Banquet",
        "capacity": 150,
        "details": "Compact hall perfect for intimate functions and conferences.",
        "images": [],
        "equipment": [
            ("Whiteboard", "Stationary", "Good", 2),
            ("LED TVs", "AV", "Good", 2),
            ("AC", "HVAC", "Good", 2),
        ],
    },
]


def seed_halls(db: Session) -> int:
    """Insert the banquet halls if the table is empty. Returns the number seeded."""
    existing = db.query(BanquetHall).count()
    if existing > 0:
        logger.info(f"Banquet halls already has {existing} rows. Skipping hall seeding.")
        return 0

    for display_id, hall in enumerate(BANQUET_HALLS, start=1):
        db_hall = BanquetHall(
            name=hall["name"],
            display_id=display_id,
            capacity=hall["capacity"],
            details=hall["details"],
            images=list(hall["images"]),
        )
        db_hall.equipment = [
            HallEquipment(name=name, type=kind, condition=condition, available=True, quantity=quantity)
            for name, kind, condition, quantity in hall["equipment"]
        ]
        db.add(db_hall)
        logger.info(f"Seeded: {hall['name']}")
    db.commit()
    return len(BANQUET_HALLS)


def seed_staff(db: Session):
    """Create the default admin and manager accounts when missing."""
    staff = [
        (UserRole.ADMIN, settings.DEFAULT_ADMIN_USERNAME, settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_PASSWORD),
        (UserRole.MANAGER, settings.DEFAULT_MANAGER_USERNAME, settings.DEFAULT_MANAGER_EMAIL, settings.DEFAULT_MANAGER_PASSWORD),
    ]
    created = []
    for role, username, email, password in staff:
        if db.query(User).filter(User.username == username).first():
            continue
        db.add(User(username=username, email=email, hashed_password=get_password_hash(password), role=role))
        created.append(username)
        logger.info(f"Default {role.value} created: username={username}")
    db.commit()
    return created


def seed_database(db: Session):
    seed_staff(db)
    seed_halls(db)
