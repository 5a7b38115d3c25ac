from keycove import encrypt, decrypt
from school_backend.settings import settings

def decrypt_password(password: str):
  return decrypt(password,settings.TOKEN_SECRET)

def encrypt_password(password: str):
  return encrypt(password,settings.TOKEN_SECRET)
