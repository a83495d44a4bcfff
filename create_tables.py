import os
import sys

# Run from the repository root without installing the package
sys.path.append(os.getcwd())

from carwash.database import engine, Base
# Import all models to ensure they are registered with Base.metadata
from carwash.models import Booking, Branch, Customer, LoyaltyTransaction, Service

def create_tables():
    print("Creating tables in database...")
    try:
        Base.metadata.create_all(bind=engine)
        print("✅ Tables created:")
        for table in Base.metadata.sorted_tables:
            print(f"  - {table.name}")
        return True
    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        return False

if __name__ == "__main__":
    sys.exit(0 if create_tables() else 1)
