import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError as DRFValidation

from care.exceptions import DuplicateAccount

User = get_user_model()
logger = logging.getLogger(__name__)

# request key -> model field
PROFILE_FIELDS = {
    'dateOfBirth': 'date_of_birth',
    'gender': 'gender',
    'phoneNumber': 'phone_number',
    'address': 'address',
    'about': 'about',
    'bloodGroup': 'blood_group',
    'emergencyContactName': 'emergency_contact_name',
    'emergencyContactNumber': 'emergency_contact_number',
    'specialization': 'specialization',
    'department': 'department',
    'hospital': 'hospital',
    'qualifications': 'qualifications',
    'licenseNumber': 'license_number',
    'experienceYears': 'experience_years',
    'position': 'position',
}


def create_account(*, name: str, email: str, password: str, role: str, **profile) -> User:
    """Create a user with a hashed password; the email doubles as username."""
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateAccount()
    try:
        validate_password(password)
    except ValidationError as e:
        raise DRFValidation({'password': e.messages})

    extra = {PROFILE_FIELDS[k]: v for k, v in profile.items() if k in PROFILE_FIELDS and v is not None}
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email, email=email, password=password, name=name, role=role, **extra
            )
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        raise DuplicateAccount()
    logger.info('created %s account %s', role, user.id)
    return user


def admin_exists() -> bool:
    return User.objects.filter(role=User.ROLE_ADMIN).exists()
