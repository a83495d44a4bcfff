import os
import sys

# Run from the repository root without installing the package
sys.path.append(os.getcwd())

from carwash.database import SessionLocal, engine, Base
from carwash.models import Branch, BranchStatus, Service, ServiceCategory

SERVICES = [
    ("Cuci Mobil Kecil Non-Hidrolik", ServiceCategory.CAR_REGULAR, 35000, 15000, 45, "Cuci mobil kecil dengan metode manual tanpa hidrolik", []),
    ("Cuci Mobil Sedang/Besar Non-Hidrolik", ServiceCategory.CAR_REGULAR, 40000, 20000, 60, "Cuci mobil sedang hingga besar dengan metode manual tanpa hidrolik", []),
    ("Cuci Steam Cepat", ServiceCategory.CAR_REGULAR, 30000, 15000, 30, "Cuci cepat menggunakan steam untuk hasil yang bersih", []),
    ("Cuci Mobil Kecil Hidrolik", ServiceCategory.CAR_PREMIUM, 45000, 20000, 60, "Cuci mobil kecil dengan sistem hidrolik profesional", ["Gratis 1 Minuman"]),
    ("Cuci Mobil Sedang/Besar Hidrolik", ServiceCategory.CAR_PREMIUM, 50000, 25000, 75, "Cuci mobil sedang hingga besar dengan sistem hidrolik profesional", ["Gratis 1 Minuman"]),
    ("Fogging Anti Bakteri", ServiceCategory.CAR_PREMIUM, 75000, 30000, 30, "Layanan fogging untuk membunuh bakteri dan virus di dalam mobil", []),
    ("Penghilang Noda Kaca", ServiceCategory.CAR_PREMIUM, 75000, 25000, 45, "Penghilangan noda membandel pada kaca mobil", []),
    ("Cuci Motor Kecil Steam", ServiceCategory.MOTORCYCLE, 13000, 10000, 20, "Cuci motor kecil menggunakan steam", []),
    ("Cuci Motor Sedang Steam", ServiceCategory.MOTORCYCLE, 15000, 10000, 25, "Cuci motor sedang menggunakan steam", []),
    ("Cuci Motor Besar Steam", ServiceCategory.MOTORCYCLE, 18000, 12000, 30, "Cuci motor besar menggunakan steam", []),
]

BRANCHES = [
    {
        "name": "Cabang Utama",
        "address": "Jl. Jend. Sudirman No. 1, Bekasi Barat",
        "phone": "021-000001",
        "bank_name": "BCA",
        "bank_account_number": "0000000001",
        "bank_account_name": "Car Wash Utama",
        "pickup_coverage_radius": 10,
        "staff_count": 8,
        "status": BranchStatus.ACTIVE,
    },
    {
        "name": "Cabang 2",
        "address": "Jl. Pulo Ribung Raya No. 100, Bekasi Selatan",
        "phone": "021-000002",
        "bank_name": "BRI",
        "bank_account_number": "0000000002",
        "bank_account_name": "Car Wash Cabang 2",
        "pickup_coverage_radius": 8,
        "staff_count": 6,
        "status": BranchStatus.ACTIVE,
    },
]

def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(Service).count() == 0:
            for name, category, price, pickup_fee, duration, description, features in SERVICES:
                db.add(Service(
                    name=name,
                    category=category,
                    price=price,
                    pickup_fee=pickup_fee,
                    supports_pickup=True,
                    duration=duration,
                    description=description,
                    features=features,
                ))
            print(f"✅ Added {len(SERVICES)} services")
        else:
            print("Services already present, skipping")

        if db.query(Branch).count() == 0:
            for branch in BRANCHES:
                db.add(Branch(**branch))
            print(f"✅ Added {len(BRANCHES)} branches")
        else:
            print("Branches already present, skipping")

        db.commit()
        return True
    except Exception as e:
        db.rollback()
        print(f"❌ Seeding failed: {e}")
        return False
    finally:
        db.close()

if __name__ == "__main__":
    if seed():
        print("\nSet ADMIN_PASSWORD_HASH to a bcrypt hash before logging in to the admin area.")
        sys.exit(0)
    sys.exit(1)
