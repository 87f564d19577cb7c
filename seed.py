from roombook import create_app, db
from roombook.models import User, Room
from werkzeug.security import generate_password_hash

app = create_app()

with app.app_context():
    db.create_all()

    # Create Admin
    if not User.query.filter_by(username='admin').first():
        admin = User(
            username='admin',
            email='admin@roombook.local',
            full_name='Administrator',
            position='Facilities',
            password_hash=generate_password_hash('password', method='pbkdf2:sha256'),
            is_admin=True
        )
        db.session.add(admin)
        print("Admin created (admin/password)")

    # Create Kitchen worker
    kitchen = User.query.filter_by(username='cozinha').first()
    if not kitchen:
        kitchen = User(
            username='cozinha',
            email='cozinha@roombook.local',
            full_name='Kitchen Staff',
            position='Kitchen',
            password_hash=generate_password_hash('password', method='pbkdf2:sha256'),
            is_kitchen=True
        )
        db.session.add(kitchen)
        db.session.flush()
        print("Kitchen user created (cozinha/password)")

    # Create Rooms; only the first floor has kitchen service
    rooms_data = [
        {"name": "Sala Alpha", "location": "1st floor", "capacity": 4, "kitchen": True},
        {"name": "Sala Beta", "location": "1st floor", "capacity": 10, "kitchen": True},
        {"name": "Auditorium", "location": "Ground floor", "capacity": 50, "kitchen": False},
        {"name": "Focus Room 1", "location": "2nd floor", "capacity": 2, "kitchen": False}
    ]

    for r_data in rooms_data:
        if not Room.query.filter_by(name=r_data['name']).first():
            room = Room(
                name=r_data['name'],
                location=r_data['location'],
                capacity=r_data['capacity'],
                assigned_kitchen_user_id=kitchen.id if r_data['kitchen'] else None
            )
            db.session.add(room)
            print(f"Room {room.name} created.")

    db.session.commit()
    print("Database seeded successfully.")
