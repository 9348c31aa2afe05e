# 🧩 iconsprite/shared/__init__.py
"""🧩 Спільний шар: помилки, логування, метрики."""
