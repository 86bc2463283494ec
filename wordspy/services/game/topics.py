"""Word lists the host can pick a topic from."""

TOPICS = {
    'animals': {
        'name': 'Animals',
        'words': [
            'Lion', 'Tiger', 'Camel', 'Eagle', 'Beagle', 'Horse', 'Moose', 'Mouse',
            'Otter', 'Hotter', 'Zebra', 'Panda', 'Koala', 'Shark', 'Snake', 'Snail',
            'Whale', 'Rabbit', 'Parrot', 'Penguin',
        ],
    },
    'food': {
        'name': 'Food',
        'words': [
            'Pizza', 'Pasta', 'Salad', 'Bread', 'Steak', 'Sushi', 'Taco', 'Nachos',
            'Burger', 'Omelette', 'Pancake', 'Cupcake', 'Noodles', 'Lemon', 'Melon',
            'Mango', 'Cheese', 'Cherry', 'Falafel', 'Hummus',
        ],
    },
    'places': {
        'name': 'Places',
        'words': [
            'Beach', 'Bench', 'Airport', 'Library', 'Hospital', 'Museum', 'Stadium',
            'Station', 'Castle', 'Cattle Farm', 'Market', 'Casino', 'Cinema', 'Desert',
            'Forest', 'Harbor', 'Island', 'Prison', 'School', 'Theater',
        ],
    },
    'professions': {
        'name': 'Professions',
        'words': [
            'Doctor', 'Dentist', 'Teacher', 'Painter', 'Printer', 'Plumber', 'Pilot',
            'Baker', 'Banker', 'Lawyer', 'Farmer', 'Singer', 'Dancer', 'Writer',
            'Waiter', 'Soldier', 'Sailor', 'Tailor', 'Chef', 'Nurse',
        ],
    },
    'objects': {
        'name': 'Everyday objects',
        'words': [
            'Chair', 'Table', 'Cable', 'Spoon', 'Phone', 'Clock', 'Block', 'Mirror',
            'Pillow', 'Window', 'Bottle', 'Kettle', 'Candle', 'Handle', 'Wallet',
            'Pencil', 'Stapler', 'Ladder', 'Hammer', 'Umbrella',
        ],
    },
}


def get_topic(topic_id):
    return TOPICS.get((topic_id or '').strip().lower())


def list_topics():
    return [
        {'id': topic_id, 'name': data['name'], 'word_count': len(data['words'])}
        for topic_id, data in TOPICS.items()
    ]
