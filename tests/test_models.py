from datetime import date

from extensions import db
from models import CalendarEvent, Circle, CircleMember, MailItem, Magnet, User


def _user(username):
    user = User(username=username, pin_hash="x")
    db.session.add(user)
    db.session.commit()
    return user


def test_deleting_user_cascades_to_owned_rows(app):
    with app.app_context():
        carol = _user("carol")
        bob = _user("bob")

        circle = Circle(name="Family", created_by=carol.id)
        circle.members.append(CircleMember(user_id=carol.id, role="admin"))
        circle.members.append(CircleMember(user_id=bob.id, role="member"))
        db.session.add(circle)
        db.session.add(Magnet(user_id=carol.id, file_path="a.png"))
        db.session.add(CalendarEvent(user_id=carol.id, title="Trip", date=date(2026, 12, 1)))
        db.session.commit()
        db.session.add(MailItem(from_user_id=carol.id, to_circle_id=circle.id, content="hi"))
        db.session.commit()

        db.session.delete(carol)
        db.session.commit()

        assert Magnet.query.count() == 0
        assert CalendarEvent.query.count() == 0
        assert Circle.query.count() == 0
        assert CircleMember.query.count() == 0
        assert MailItem.query.count() == 0
        assert db.session.get(User, bob.id) is not None


def test_converter_deletion_keeps_mail(app):
    with app.app_context():
        carol = _user("carol")
        bob = _user("bob")
        circle = Circle(name="Family", created_by=carol.id)
        db.session.add(circle)
        db.session.commit()
        mail = MailItem(
            from_user_id=carol.id,
            to_circle_id=circle.id,
            media_path="b.png",
            media_type="image",
            is_converted_to_magnet=True,
            converted_by_user_id=bob.id,
        )
        db.session.add(mail)
        db.session.commit()
        mail_id = mail.id

        db.session.delete(bob)
        db.session.commit()
        db.session.expire_all()

        stored = db.session.get(MailItem, mail_id)
        assert stored is not None
        assert stored.converted_by_user_id is None
        assert stored.is_converted_to_magnet is True
