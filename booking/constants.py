# Fixed service catalog offered on the booking page.
# Durations are parsed by booking.utils.durations.parse_duration_minutes.
SALON_SERVICES = {
    "men": [
        {"id": "haircut-men", "name": "Premium Haircut", "duration": "45 min", "price": "$65"},
        {"id": "beard-styling", "name": "Beard Styling", "duration": "30 min", "price": "$45"},
        {"id": "grooming-package", "name": "Complete Grooming Package", "duration": "90 min", "price": "$120"},
    ],
    "women": [
        {"id": "haircut-women", "name": "Haircut & Style", "duration": "60 min", "price": "$85"},
        {"id": "hair-coloring", "name": "Hair Coloring", "duration": "120 min", "price": "$150"},
        {"id": "makeup", "name": "Professional Makeup", "duration": "45 min", "price": "$95"},
        {"id": "spa-treatment", "name": "Spa Treatment", "duration": "90 min", "price": "$120"},
    ],
}