# Bundled products served when the catalog database is unreachable or empty

FALLBACK_PRODUCTS = [
    {
        "id": 1,
        "name": "Oyster Perpetual",
        "description": "The essence of the Oyster, exclusively in stainless steel.",
        "price": 8500.00,
        "category": "Luxury",
        "image_url": "https://images.unsplash.com/photo-1614767626353-c9cccce28cc6?auto=format&fit=crop&w=800&q=80",
        "tags": ["Automatic", "Steel", "Water Resistant"],
    },
    {
        "id": 2,
        "name": "Speedmaster Moonwatch",
        "description": "The legendary chronograph that has been a part of all six lunar missions.",
        "price": 7600.00,
        "category": "Sport",
        "image_url": "https://images.unsplash.com/photo-1522312346375-d1a52e2b99b3?auto=format&fit=crop&w=800&q=80",
        "tags": ["Chronograph", "Manual", "History"],
    },
    {
        "id": 3,
        "name": "Tank Must",
        "description": "A chic and elegant watch that stands the test of time.",
        "price": 4500.00,
        "category": "Dress",
        "image_url": "https://images.unsplash.com/photo-1524592094714-0f0654e20314?auto=format&fit=crop&w=800&q=80",
        "tags": ["Quartz", "Leather", "Rectangular"],
    },
    {
        "id": 4,
        "name": "Seamaster Diver 300M",
        "description": "Since 1993, the Seamaster Professional Diver 300M has enjoyed a legendary following.",
        "price": 5900.00,
        "category": "Diver",
        "image_url": "https://images.unsplash.com/photo-1612817288484-9691c95b678a?auto=format&fit=crop&w=800&q=80",
        "tags": ["Automatic", "Ceramic", "300m"],
    },
    {
        "id": 5,
        "name": "Monaco Calibre 11",
        "description": "The timeless classic worn by Steve McQueen.",
        "price": 8250.00,
        "category": "Sport",
        "image_url": "https://images.unsplash.com/photo-1614767625721-e378393e8e19?auto=format&fit=crop&w=800&q=80",
        "tags": ["Automatic", "Chronograph", "Iconic"],
    },
    {
        "id": 6,
        "name": "Black Bay 58",
        "description": "A tribute to the brand's first divers' watches.",
        "price": 3950.00,
        "category": "Diver",
        "image_url": "https://images.unsplash.com/photo-1619134778706-c27533cdcd67?auto=format&fit=crop&w=800&q=80",
        "tags": ["Automatic", "Vintage", "200m"],
    },
    {
        "id": 7,
        "name": "Big Pilot",
        "description": "The iconic pilot's watch with a massive 46mm case.",
        "price": 12900.00,
        "category": "Pilot",
        "image_url": "https://images.unsplash.com/photo-1587836374828-4dbafa64ef54?auto=format&fit=crop&w=800&q=80",
        "tags": ["Automatic", "Date", "Leather"],
    },
    {
        "id": 8,
        "name": "Royal Oak",
        "description": "With its steel case, octagonal bezel, and \"tapisserie\" dial.",
        "price": 35000.00,
        "category": "Luxury",
        "image_url": "https://images.unsplash.com/photo-1548169874-53e85f753f1e?auto=format&fit=crop&w=800&q=80",
        "tags": ["Automatic", "Steel", "Iconic"],
    },
]
