#!/usr/bin/env python3
"""
Seed script to create demo staff users and an open tab
"""

import asyncio
import uuid
from datetime import datetime, timezone

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from app.database import SessionLocal, engine, Base
    from app.models.order import Order
    from app.models.user import User, UserRole
    from app.schemas.auth import StaffCreate

    demo_users = [
        StaffCreate(email="admin@example.com", password="admin123", full_name="Demo Admin", role=UserRole.ADMIN),
        StaffCreate(email="staff@example.com", password="staff123", full_name="Demo Waiter"),
    ]

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        result = await db.execute(select(User).where(User.email == "admin@example.com"))
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo users...")

        for demo in demo_users:
            db.add(User(
                id=str(uuid.uuid4()),
                email=demo.email,
                hashed_password=pwd_context.hash(demo.password),
                full_name=demo.full_name,
                role=demo.role,
                is_active=True,
            ))

        print("Creating an open tab for table 1...")

        items = [
            {"id": "1", "name": "Lentil Soup", "price": 90.0, "quantity": 2},
            {"id": "7", "name": "Ayran", "price": 35.0, "quantity": 2},
        ]
        db.add(Order(
            id=str(uuid.uuid4()),
            table_id="1",
            session_id=str(uuid.uuid4()),
            items=items,
            total_price=sum(item["price"] * item["quantity"] for item in items),
            status="new",
            payment_status="pending",
            order_note="No onions",
            timestamp=datetime.now(timezone.utc),
            version=1,
        ))

        await db.commit()

    print("\n✅ Demo data seeded successfully!")
    print("\nDemo Credentials:")
    print("  Admin: admin@example.com / admin123")
    print("  Staff: staff@example.com / staff123")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
