# college_erp/services/user_service.py
import json
import logging
import random
import string
from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from college_erp.core.config import settings
from college_erp.core.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    IntegrityCheckError,
    NotFoundError,
)
from college_erp.core.security import get_password_hash
from college_erp.models.user import (
    AdminDetail,
    Department,
    FacultyDetail,
    StudentDetail,
    SuperuserDetail,
    User,
    UserRole,
)
from college_erp.schemas.user import (
    FACULTY_FIELDS,
    STUDENT_FIELDS,
    AdminDetailPublic,
    FacultyDetailPublic,
    StudentDetailPublic,
    SuperuserDetailPublic,
    UserCreate,
    UserProfile,
    UserUpdate,
)
from college_erp.services.role_service import ensure_role_consistent

logger = logging.getLogger(__name__)

MAX_ID_ATTEMPTS = 50

# role -> (prefix, number of random digits)
ID_FORMATS = {
    UserRole.FACULTY: ("F", 4),
    UserRole.ADMIN: ("A", 4),
    UserRole.SUPERUSER: ("SU", 4),
}

BASE_UPDATE_FIELDS = ("name", "email", "profile_picture_url", "department_id")
# only these may be cleared with an explicit null
CLEARABLE_FIELDS = ("profile_picture_url", "department_id")


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return (
        db.query(User)
        .filter(func.lower(User.email) == email.strip().lower())
        .first()
    )


def list_users(
    db: Session,
    *,
    role: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return query.order_by(User.name.asc()).offset(skip).limit(limit).all()


def list_departments(db: Session) -> List[Department]:
    return db.query(Department).order_by(Department.name.asc()).all()


def generate_user_id(db: Session, role: UserRole) -> str:
    """
    Random role-prefixed id that is not taken yet:
    students <STUDENT_ID_PREFIX> + STUDENT_ID_SUFFIX_DIGITS digits, faculty F + 4,
    admins A + 4, superusers SU + 4.
    """
    if role == UserRole.STUDENT:
        prefix, digits = settings.STUDENT_ID_PREFIX, settings.STUDENT_ID_SUFFIX_DIGITS
    else:
        prefix, digits = ID_FORMATS[role]

    for _ in range(MAX_ID_ATTEMPTS):
        candidate = prefix + "".join(random.choices(string.digits, k=digits))
        if db.get(User, candidate) is None:
            return candidate

    raise IntegrityCheckError(
        f"Failed to generate a unique id with prefix {prefix} after {MAX_ID_ATTEMPTS} attempts."
    )


def _parse_permissions(raw: Optional[str]) -> str:
    if not raw:
        return "{}"
    try:
        json.loads(raw)
    except ValueError as exc:
        raise BadRequestError("Superuser permissions must be valid JSON.") from exc
    return raw


def _build_role_detail(user_id: str, role: UserRole, obj_in: UserCreate):
    if role == UserRole.STUDENT:
        return StudentDetail(
            user_id=user_id,
            enrollment_date=date.today(),
            **{field: getattr(obj_in, field) for field in STUDENT_FIELDS},
        )
    if role == UserRole.FACULTY:
        return FacultyDetail(
            user_id=user_id,
            department_id=obj_in.department_id,
            **{field: getattr(obj_in, field) for field in FACULTY_FIELDS},
        )
    if role == UserRole.ADMIN:
        return AdminDetail(
            user_id=user_id,
            permission_level=obj_in.permission_level or "full_access",
        )
    return SuperuserDetail(
        user_id=user_id,
        permissions=_parse_permissions(obj_in.superuser_permissions),
    )


def _role_detail(user: User):
    return {
        UserRole.STUDENT.value: user.student_detail,
        UserRole.FACULTY.value: user.faculty_detail,
        UserRole.ADMIN.value: user.admin_detail,
        UserRole.SUPERUSER.value: user.superuser_detail,
    }.get(user.role)


def _ensure_department(db: Session, department_id: Optional[int]) -> None:
    if department_id is not None and db.get(Department, department_id) is None:
        raise NotFoundError("Department not found.")


def build_profile(user: User, role: UserRole) -> UserProfile:
    profile = UserProfile.model_validate(user)
    profile.role = role.value
    if role == UserRole.STUDENT and user.student_detail is not None:
        profile.student_details = StudentDetailPublic.model_validate(user.student_detail)
    elif role == UserRole.FACULTY and user.faculty_detail is not None:
        profile.faculty_details = FacultyDetailPublic.model_validate(user.faculty_detail)
    elif role == UserRole.ADMIN and user.admin_detail is not None:
        profile.admin_details = AdminDetailPublic.model_validate(user.admin_detail)
    elif role == UserRole.SUPERUSER and user.superuser_detail is not None:
        profile.superuser_details = SuperuserDetailPublic.model_validate(user.superuser_detail)
    return profile


def get_user_profile(db: Session, user_id: str) -> UserProfile:
    """
    Profile with the role re-derived from the detail tables on every call.
    A detail row that disagrees with the role column is a 500, as on login.
    """
    logger.debug(f"Fetching profile for user ID: {user_id}")
    user = get_user(db, user_id)
    if user is None:
        logger.warning(f"User profile not found for ID: {user_id}")
        raise NotFoundError("User not found.")

    role = ensure_role_consistent(db, user, UserRole(user.role))
    return build_profile(user, role)


def create_user(db: Session, *, obj_in: UserCreate) -> User:
    """
    Insert the user and its role-detail row in one transaction.
    """
    role = UserRole(obj_in.role)
    logger.info(f"Creating {role.value} user {obj_in.email}")

    if get_user_by_email(db, obj_in.email) is not None:
        raise ConflictError("A user with this email already exists.")
    _ensure_department(db, obj_in.department_id)
    if role == UserRole.FACULTY and obj_in.department_id is None:
        raise BadRequestError("Faculty members must belong to a department.")

    user = User(
        id=generate_user_id(db, role),
        name=obj_in.name,
        email=obj_in.email,
        password_hash=get_password_hash(obj_in.password),
        profile_picture_url=obj_in.profile_picture_url,
        department_id=obj_in.department_id,
        role=role.value,
    )
    detail = _build_role_detail(user.id, role, obj_in)

    try:
        db.add(user)
        db.flush()
        db.add(detail)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(f"User creation for {obj_in.email} rolled back: {exc.orig}")
        raise ConflictError("User could not be created because it conflicts with existing data.") from exc

    db.refresh(user)
    logger.info(f"User {user.id} ({role.value}) created")
    return user


def update_user(db: Session, *, db_obj: User, obj_in: UserUpdate) -> User:
    update_data = obj_in.model_dump(exclude_unset=True)

    new_role = update_data.pop("role", None)
    if new_role is not None and new_role != db_obj.role:
        raise BadRequestError("Changing a user's role is not supported.")

    new_email = update_data.get("email")
    if new_email is not None:
        existing = get_user_by_email(db, new_email)
        if existing is not None and existing.id != db_obj.id:
            raise ConflictError("A user with this email already exists.")
    if "department_id" in update_data:
        _ensure_department(db, update_data["department_id"])

    password = update_data.pop("password", None)
    if password:
        db_obj.password_hash = get_password_hash(password)

    for field in BASE_UPDATE_FIELDS:
        if field in update_data and (update_data[field] is not None or field in CLEARABLE_FIELDS):
            setattr(db_obj, field, update_data[field])

    detail = _role_detail(db_obj)
    if detail is None:
        raise IntegrityCheckError(
            "User role is not configured.", details={"user_id": db_obj.id}
        )

    if db_obj.role == UserRole.STUDENT.value:
        detail_fields = {f: update_data[f] for f in STUDENT_FIELDS if f in update_data}
    elif db_obj.role == UserRole.FACULTY.value:
        detail_fields = {f: update_data[f] for f in FACULTY_FIELDS if f in update_data}
        if update_data.get("department_id") is not None:
            detail_fields["department_id"] = update_data["department_id"]
    elif db_obj.role == UserRole.ADMIN.value:
        detail_fields = {}
        if update_data.get("permission_level"):
            detail_fields["permission_level"] = update_data["permission_level"]
    else:
        detail_fields = {}
        if "superuser_permissions" in update_data:
            detail_fields["permissions"] = _parse_permissions(update_data["superuser_permissions"])

    for field, value in detail_fields.items():
        setattr(detail, field, value)

    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    logger.info(f"User {db_obj.id} updated")
    return db_obj


def delete_user(db: Session, *, db_obj: User, acting_user: User) -> None:
    if db_obj.id == acting_user.id:
        raise BadRequestError("You cannot delete your own account.")
    if db_obj.role == UserRole.SUPERUSER.value and acting_user.role != UserRole.SUPERUSER.value:
        raise ForbiddenError("Only superusers can delete superuser accounts.")

    user_id = db_obj.id
    db.delete(db_obj)
    db.commit()
    logger.info(f"User {user_id} deleted by {acting_user.id}")
