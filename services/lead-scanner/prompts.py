"""Vision prompt for business card field extraction.

The field list must stay in sync with CARD_FIELDS in card_scanner.py.
"""

CARD_EXTRACTION_PROMPT = """Analyze this business card image and extract all visible information.

Please extract the following fields if they are present on the card:
- firstName: First name of the person
- lastName: Last name of the person
- company: Company/organization name
- position: Job title or position
- email: Email address
- phoneNumber: Phone number (with country code if visible)
- website: Website URL
- address: Street address
- city: City name
- country: Country name

Return the data in valid JSON format with only the fields that are found on the card. Use null for missing fields. Do not make assumptions or add data that is not visible on the card.

Example format:
{
  "firstName": "John",
  "lastName": "Doe",
  "company": "Tech Corp",
  "position": "CEO",
  "email": "john@techcorp.com",
  "phoneNumber": "+1234567890",
  "website": "www.techcorp.com",
  "address": "123 Tech Street",
  "city": "San Francisco",
  "country": "USA"
}

CRITICAL OUTPUT RULES:
- Return ONLY the JSON object. No other text before or after.
- Do NOT wrap in code fences. Just raw JSON."""
