"""Hungarian strings. Keys missing here fall back to English."""

STRINGS = {
    "private": "Felhasználónév és jelszó szükséges a belépéshez",
    "authfail": "Hibás név vagy jelszó",
    "user": "Felhasználó",
    "track": "Útvonal",
    "latest": "Utolsó rögzített pont",
    "autoreload": "Automatikus frissítés",
    "reload": "Frissítés most",
    "export": "Adatok letöltése",
    "chart": "Magasság diagramm",
    "close": "Bezár",
    "time": "Rögzítés ideje",
    "speed": "Sebesség",
    "accuracy": "Pontosság",
    "altitude": "Magasság",
    "ttime": "Menetidő",
    "aspeed": "Átlagsebesség",
    "tdistance": "Megtett út",
    "pointof": "Rögzített pontok száma %d / %d",
    "summary": "Utazás adatai",
    "suser": "Felhasználónév",
    "logout": "Kilépés",
    "login": "Belépés",
    "username": "Felhasználó",
    "password": "Jelszó",
    "language": "Nyelv",
    "newinterval": "Automatikus frissítés ideje (másodpercben)",
    "units": "Mértékegység",
    "metric": "Metrikus",
    "adminmenu": "Adminisztráció",
}
