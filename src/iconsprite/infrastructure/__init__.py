# 🏗️ iconsprite/infrastructure/__init__.py
"""🏗️ Інфраструктурний шар: мережа, Figma API, експорт, збірка спрайтів, сервіси."""
