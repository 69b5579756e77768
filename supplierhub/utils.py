from datetime import datetime

def now_str():
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

def clean_str(s):
    """strip() tolerante a None; string vazia vira None."""
    if s is None: return None
    s = str(s).strip()
    return s or None
