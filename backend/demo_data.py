"""Sample collections written by the seed-demo-data endpoint."""
import uuid
from datetime import datetime, timezone


def demo_publications():
    created_at = datetime.now(timezone.utc).isoformat()
    return [
        {
            'id': str(uuid.uuid4()),
            'year': 2024,
            'title': 'AI-Driven Personalized Learning in Higher Education',
            'venue': 'IEEE Transactions on Education',
            'citations': 45,
            'impact': 3.8,
            'tier': 'top',
            'coAuthors': ['Dr. Wilson', 'Dr. Patel'],
            'createdAt': created_at,
        },
        {
            'id': str(uuid.uuid4()),
            'year': 2024,
            'title': 'Blockchain for Academic Credential Verification',
            'venue': 'International Conference on Learning Analytics',
            'citations': 32,
            'impact': 2.9,
            'tier': 'high',
            'coAuthors': ['Dr. Kim', 'Dr. Rodriguez'],
            'createdAt': created_at,
        },
        {
            'id': str(uuid.uuid4()),
            'year': 2023,
            'title': 'Gamification in Computer Science Education',
            'venue': 'ACM Transactions on Computing Education',
            'citations': 78,
            'impact': 4.2,
            'tier': 'top',
            'coAuthors': ['Dr. Wilson', 'Dr. Chen', 'Dr. Taylor'],
            'createdAt': created_at,
        },
    ]


def demo_skills():
    return [
        {'skill': 'Research', 'current': 90, 'target': 95},
        {'skill': 'Teaching', 'current': 85, 'target': 90},
        {'skill': 'Leadership', 'current': 65, 'target': 85},
        {'skill': 'Digital', 'current': 70, 'target': 90},
        {'skill': 'Domain Expertise', 'current': 92, 'target': 95},
        {'skill': 'Communication', 'current': 80, 'target': 85},
    ]


def demo_fdps():
    return {
        'upcoming': [
            {
                'id': str(uuid.uuid4()),
                'title': 'Academic Leadership Excellence',
                'category': 'Leadership',
                'duration': '5 days',
                'dates': 'Jan 15-20, 2025',
                'location': 'Online',
                'participants': 45,
                'match': 94,
                'color': '#00D9FF',
                'registrationDeadline': '5 days left',
                'urgent': True,
                'status': 'enrolled',
            },
        ],
        'completed': [
            {
                'id': str(uuid.uuid4()),
                'title': 'Advanced Research Methodology',
                'category': 'Research',
                'completedDate': 'Nov 2024',
                'duration': '3 days',
                'certificate': True,
                'skills': ['Research Design', 'Data Analysis', 'Statistical Methods'],
                'color': '#0096FF',
                'status': 'completed',
            },
        ],
    }
