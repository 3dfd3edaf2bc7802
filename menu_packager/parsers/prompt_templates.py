MENU_EXTRACTION_PROMPT = r"""
You are a helpful assistant that extracts menu items and prices from images or PDFs of restaurant menus.

Please extract all menu items with their prices from this menu.
For each item, format it as a single line with the item name, followed by a hyphen, followed by the price.

For example:
Margherita Pizza - £12.99
Caesar Salad - £8.50
Tiramisu - £6.95

Only include items that have both a name and price. Do not include any additional text, explanations, or headings.
"""

PACKAGE_SYSTEM_PROMPT = r"""
You are a helpful restaurant menu package creator.
Return ONLY valid JSON. No markdown. No explanation.
"""

PACKAGE_USER_PROMPT_TEMPLATE = r"""
Based on this menu: {menu_json}

Create a package for {audience} dining preferences. Select the following:
- {starter_count} starter(s)
- {main_count} main course(s)
- {dessert_count} dessert(s)

Consider these preferences: {preferences}
Avoid: {avoid}

Only pick items that appear on the menu and copy their name and price exactly.

Return ONLY a JSON object with these fields:
- starters: array of objects, each with name and price
- mains: array of objects, each with name and price
- desserts: array of objects, each with name and price
"""
