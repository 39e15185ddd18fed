from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# Hash a password
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def is_hashed(stored_password: str) -> bool:
    return pwd_context.identify(stored_password, required=False) is not None


# Verify a plain password against the stored value.
# Seeded admins are plaintext unless HASH_ADMIN_PASSWORDS is set, in which case
# the stored value is a bcrypt hash.
def verify_password(plain_password: str, stored_password: str) -> bool:
    if is_hashed(stored_password):
        return pwd_context.verify(plain_password, stored_password)
    return plain_password == stored_password
