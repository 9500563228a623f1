from database import engine, Base, TransactionRecord, Setting

def migrate_db():
    print("Migrating database...")
    # Creates any missing tables (transactions, settings)
    Base.metadata.create_all(bind=engine)
    print(f"Migration complete! Tables: {TransactionRecord.__tablename__}, {Setting.__tablename__}")

if __name__ == "__main__":
    migrate_db()
