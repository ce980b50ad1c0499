"""Promote an existing user to admin (or back to member)"""
import argparse
import asyncio
from typing import Optional
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from campusnet.core.database import get_session_local, close_db
from campusnet.models.user import User, UserRole


async def set_role(db: AsyncSession, identifier: str, role: UserRole) -> Optional[User]:
    """Look up a user by email or username and store the new role"""
    lookup = identifier.strip().lower()
    result = await db.execute(
        select(User).where(or_(User.email == lookup, User.username == lookup))
    )
    user = result.scalars().first()
    if user is None:
        return None

    user.role = role
    await db.commit()
    await db.refresh(user)
    return user


async def main(identifier: str, demote: bool = False) -> int:
    role = UserRole.MEMBER if demote else UserRole.ADMIN
    session_local = get_session_local()
    try:
        async with session_local() as db:
            user = await set_role(db, identifier, role)
    finally:
        await close_db()

    if user is None:
        print(f"No user with email or username '{identifier}'")
        return 1

    print(f"{user.username} ({user.email}) is now {user.role.value}")
    print("Existing tokens keep their old role claim; admin checks read the database.")
    return 0


def run():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("identifier", help="email or username")
    parser.add_argument("--demote", action="store_true", help="set the role back to member")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.identifier, args.demote)))


if __name__ == "__main__":
    run()
