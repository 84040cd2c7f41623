from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _iso(value):
    return value.isoformat() if value else None


class FileMetadata(db.Model):
    __tablename__ = 'file_metadata'

    id = db.Column(db.Integer, primary_key=True)
    original_name = db.Column(db.String(255), nullable=False)
    mime_type = db.Column(db.String(100))
    path = db.Column(db.String(500), nullable=False)
    size = db.Column(db.Integer, nullable=False, default=0)
    upload_date = db.Column(db.DateTime, default=datetime.utcnow)
    resumes = db.relationship('Resume', backref='file', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'originalName': self.original_name,
            'mimeType': self.mime_type,
            'path': self.path,
            'size': self.size,
            'uploadDate': _iso(self.upload_date),
        }


class Resume(db.Model):
    __tablename__ = 'resumes'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200))
    email = db.Column(db.String(200))
    phone = db.Column(db.String(50))
    skills = db.Column(db.JSON, nullable=False, default=list)
    file_id = db.Column(db.Integer, db.ForeignKey('file_metadata.id'))
    extra = db.Column(db.JSON, nullable=False, default=dict)

    def to_dict(self):
        data = dict(self.extra or {})
        data.update({'id': self.id, 'skills': list(self.skills or [])})
        # fields the resume never carried stay out of the payload
        optional = {
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'fileId': self.file_id,
        }
        data.update((key, value) for key, value in optional.items() if value is not None)
        return data


class Job(db.Model):
    __tablename__ = 'jobs'

    # wire key -> column attribute; anything else lands in `extra`
    FIELDS = {
        'title': 'title',
        'description': 'description',
        'requiredSkills': 'required_skills',
        'company': 'company',
        'location': 'location',
    }
    READ_ONLY = {'id', 'postedAt'}

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    required_skills = db.Column(db.JSON, nullable=False, default=list)
    company = db.Column(db.String(200))
    location = db.Column(db.String(200))
    posted_at = db.Column(db.DateTime, default=datetime.utcnow)
    extra = db.Column(db.JSON, nullable=False, default=dict)

    def apply_fields(self, data):
        """Overlay `data` onto the job; keys not mentioned keep their values."""
        extra = dict(self.extra or {})
        for key, value in data.items():
            if key in self.READ_ONLY:
                continue
            if key == 'requiredSkills' and value is None:
                value = []
            if key in self.FIELDS:
                setattr(self, self.FIELDS[key], value)
            else:
                extra[key] = value
        # reassign so the JSON column is flagged dirty
        self.extra = extra

    def to_dict(self):
        data = dict(self.extra or {})
        data.update({
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'requiredSkills': list(self.required_skills or []),
            'company': self.company,
            'location': self.location,
            'postedAt': _iso(self.posted_at),
        })
        return data


class Application(db.Model):
    __tablename__ = 'applications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(100))
    # plain reference: applications outlive the job they point at
    job_id = db.Column(db.Integer, nullable=False, index=True)
    applied_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'jobId': self.job_id,
            'appliedAt': _iso(self.applied_at),
        }


class EmailOtp(db.Model):
    __tablename__ = 'emails'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    otp = db.Column(db.String(20), nullable=False)
