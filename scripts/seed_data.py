#!/usr/bin/env python3
"""
Seed Data Script
================
Creates the tables if needed and loads a sample roster plus the
developer ("made by") record. Rows that already exist are left alone,
so the script can be re-run safely.

Usage:
    python scripts/seed_data.py

Sample logins afterwards:
    Admin:   ADMIN001 / 2000-01-01
    Student: 23CAU001 / 2005-03-07
"""

import asyncio
import os
import sys

from dotenv import load_dotenv
from sqlalchemy import select

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

load_dotenv()

from campuscircle.db.base import Base  # noqa: E402
from campuscircle.db.session import AsyncSessionLocal, engine  # noqa: E402
from campuscircle.models import DeveloperInfo, Student  # noqa: E402

# (roll_number, dob, name, department, batch)
STUDENTS = [
    ("ADMIN001", "2000-01-01", "Admin User", "Administration", "2020"),
    ("21CAU001", "2003-05-15", "Rahul Sharma", "Computer Science", "2021"),
    ("21CAU002", "2003-07-22", "Priya Singh", "Computer Science", "2021"),
    ("21CAU003", "2003-03-10", "Amit Kumar", "Computer Science", "2021"),
    ("21CAU004", "2003-08-30", "Sneha Patel", "Electronics", "2021"),
    ("21CAU005", "2003-11-05", "Vikram Reddy", "Electronics", "2021"),
    ("21CAU006", "2003-02-14", "Anjali Gupta", "Mechanical", "2021"),
    ("21CAU007", "2003-06-18", "Rajesh Verma", "Mechanical", "2021"),
    ("22CAU001", "2004-01-25", "Kavya Krishnan", "Computer Science", "2022"),
    ("22CAU002", "2004-04-12", "Arjun Nair", "Computer Science", "2022"),
    ("22CAU003", "2004-09-08", "Divya Menon", "Electronics", "2022"),
    ("22CAU004", "2004-12-20", "Karthik Iyer", "Mechanical", "2022"),
    ("23CAU001", "2005-03-07", "Meera Joshi", "Computer Science", "2023"),
    ("23CAU002", "2005-05-19", "Rohan Kapoor", "Computer Science", "2023"),
    ("23CAU003", "2005-07-28", "Neha Agarwal", "Electronics", "2023"),
]

DEVELOPER_INFO = {
    "developer_name": os.getenv("DEVELOPER_NAME", "CampusCircle Team"),
    "github": os.getenv("DEVELOPER_GITHUB", "https://github.com/campuscircle"),
    "instagram": os.getenv("DEVELOPER_INSTAGRAM", "https://instagram.com/campuscircle"),
    "message": (
        "Built for our college community. CampusCircle aims to connect students "
        "and foster meaningful interactions within our campus."
    ),
    "email": os.getenv("DEVELOPER_EMAIL"),
    "portfolio": os.getenv("DEVELOPER_PORTFOLIO"),
}


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        result = await db.execute(select(Student.roll_number))
        existing = set(result.scalars().all())

        added = 0
        for roll_number, dob, name, department, batch in STUDENTS:
            if roll_number in existing:
                continue
            db.add(Student(
                roll_number=roll_number,
                dob=dob,
                name=name,
                department=department,
                batch=batch,
                profile_image="",
            ))
            added += 1

        result = await db.execute(select(DeveloperInfo.id).limit(1))
        if result.scalar_one_or_none() is None:
            db.add(DeveloperInfo(**DEVELOPER_INFO))
            print("✅ Developer info inserted")
        else:
            print("ℹ️  Developer info already present")

        await db.commit()
        print(f"✅ {added} students inserted ({len(STUDENTS) - added} already present)")

    await engine.dispose()

    print("\nSample login credentials:")
    print("  Admin:   ADMIN001 / 2000-01-01")
    print("  Student: 23CAU001 / 2005-03-07")


if __name__ == "__main__":
    asyncio.run(seed())
