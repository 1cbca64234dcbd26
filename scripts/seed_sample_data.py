"""
Заполнение таблицы company примерными данными.
Запуск из корня проекта: python -m scripts.seed_sample_data
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from app.config import SYNC_DATABASE_URL, BASE_DIR
from app.database import Base
from app.models import Company

COMPANIES = [
    {"name": "Acme Trading", "code": "ACME", "country": "Cyprus", "website": "https://acme.example", "phone": "+357 22 000001"},
    {"name": "Blue Harbour", "code": "BLHR", "country": "Greece", "website": "https://blueharbour.example", "phone": None},
    {"name": "Northwind", "code": "NWND", "country": "Cyprus", "website": None, "phone": "+357 25 000002"},
    {"name": "Zenith Labs", "code": None, "country": None, "website": None, "phone": None},
]


def main():
    (BASE_DIR / "data").mkdir(parents=True, exist_ok=True)
    engine = create_engine(SYNC_DATABASE_URL, echo=False)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    with Session() as session:
        added = 0
        for data in COMPANIES:
            existing = session.execute(select(Company).where(Company.name == data["name"])).scalar_one_or_none()
            if existing:
                continue
            session.add(Company(**data))
            added += 1
        session.commit()
    print(f"Added {added} companies.")


if __name__ == "__main__":
    main()
