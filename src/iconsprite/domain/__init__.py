# 🧠 iconsprite/domain/__init__.py
"""🧠 Доменний шар: сутності та контракти експорту і збірки спрайтів."""
