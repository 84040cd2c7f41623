import logging

from flask import Blueprint, Flask, current_app, jsonify, request

from config import Config
from errors import (
    NotFoundError, ValidationError, json_body, parse_id, register_error_handlers,
    require_list, require_scalars,
)
from evaluator import match_resumes, recommend_jobs, search_resumes
from generator import generate_description
from ingest import allowed_file, ingest_resume
from mailer import count_emails, issue_otp, mail, relay_email, verify_otp
from models import db, Application, Job, Resume

logger = logging.getLogger(__name__)

resumes_bp = Blueprint('resumes', __name__, url_prefix='/api')
jobs_bp = Blueprint('jobs', __name__, url_prefix='/api')
mail_bp = Blueprint('mail', __name__, url_prefix='/api')

SERVICES = {
    'resumes': resumes_bp,
    'jobs': jobs_bp,
    'mail': mail_bp,
}


# ========== RESUMES ==========

@resumes_bp.route('/resume', methods=['POST'])
def save_resume():
    data = json_body()
    require_list(data, 'skills')
    require_scalars(data, ('name', 'email', 'phone'))
    skills = data.get('skills') or []

    resume = Resume(
        name=data.get('name'),
        email=data.get('email'),
        phone=data.get('phone'),
        skills=skills,
        extra={k: v for k, v in data.items() if k not in ('id', '_id', 'name', 'email', 'phone', 'skills', 'fileId')},
    )
    db.session.add(resume)
    db.session.commit()

    return jsonify({
        'message': 'Resume saved successfully!',
        'analysisResult': {
            'skills': skills,
            'recommendedJobs': recommend_jobs(skills, Job.query.all()),
        },
    })


@resumes_bp.route('/resumes', methods=['GET'])
def list_resumes():
    term = request.args.get('search', '')
    resumes = search_resumes(Resume.query.order_by(Resume.id).all(), term)
    return jsonify([r.to_dict() for r in resumes])


@resumes_bp.route('/resumes/count', methods=['GET'])
def resume_count():
    return jsonify({'success': True, 'count': Resume.query.count()})


@resumes_bp.route('/resumes/<resume_id>', methods=['DELETE'])
def delete_resume(resume_id):
    pk = parse_id(resume_id, 'resume')
    resume = db.session.get(Resume, pk)
    if not resume:
        raise NotFoundError('Resume not found')
    db.session.delete(resume)
    db.session.commit()
    logger.info('Deleted resume %s', pk)
    return jsonify({'message': 'Resume deleted successfully'})


@resumes_bp.route('/upload', methods=['POST'])
def upload_resume():
    file = request.files.get('resume')
    if not file or not file.filename:
        raise ValidationError('No file uploaded')
    if not allowed_file(file.filename, current_app.config['ALLOWED_EXTENSIONS']):
        raise ValidationError('Unsupported file type')

    metadata, resume = ingest_resume(file, current_app.config['UPLOAD_FOLDER'])
    return jsonify({
        'message': 'File uploaded and saved successfully!',
        'fileData': metadata.to_dict(),
        'resumeData': resume.to_dict(),
    })


# ========== JOBS ==========

def _get_job(job_id):
    job = db.session.get(Job, parse_id(job_id, 'job'))
    if not job:
        raise NotFoundError('Job not found')
    return job


def _check_job_fields(data):
    require_list(data, 'requiredSkills')
    require_scalars(data, ('title', 'description', 'company', 'location'))


@jobs_bp.route('/jobs', methods=['POST'])
def create_job():
    data = json_body()
    if not data.get('title'):
        raise ValidationError('title is required')
    _check_job_fields(data)

    job = Job()
    job.apply_fields(data)
    db.session.add(job)
    db.session.commit()
    return jsonify({'message': 'Job posted successfully!', 'job': job.to_dict()}), 201


@jobs_bp.route('/jobs', methods=['GET'])
def list_jobs():
    return jsonify([job.to_dict() for job in Job.query.order_by(Job.id).all()])


@jobs_bp.route('/jobs/<job_id>', methods=['GET'])
def get_job(job_id):
    return jsonify(_get_job(job_id).to_dict())


@jobs_bp.route('/jobs/<job_id>', methods=['PUT'])
def update_job(job_id):
    job = _get_job(job_id)
    data = json_body()
    if 'title' in data and not data['title']:
        raise ValidationError('title cannot be empty')
    _check_job_fields(data)

    job.apply_fields(data)
    db.session.commit()
    return jsonify({'message': 'Job updated successfully', 'job': job.to_dict()})


@jobs_bp.route('/jobs/<job_id>', methods=['DELETE'])
def delete_job(job_id):
    job = _get_job(job_id)
    pk = job.id
    db.session.delete(job)
    db.session.commit()
    logger.info('Deleted job %s', pk)
    return jsonify({'message': 'Job deleted successfully'})


@jobs_bp.route('/apply', methods=['POST'])
def apply_for_job():
    data = json_body()
    job = db.session.get(Job, parse_id(data.get('jobId'), 'job'))
    if not job:
        raise NotFoundError('Job not found. Unable to apply.')

    user_id = data.get('userId')
    db.session.add(Application(user_id=None if user_id is None else str(user_id), job_id=job.id))
    db.session.commit()
    return jsonify({'message': 'Application submitted successfully.'})


@jobs_bp.route('/generate-description', methods=['POST'])
def generate_job_description():
    data = json_body()
    if not data.get('jobTitle'):
        raise ValidationError('jobTitle is required')
    description = generate_description(data['jobTitle'], data.get('skills', ''))
    return jsonify({'description': description})


@jobs_bp.route('/match-resumes', methods=['POST'])
def match_resumes_to_job():
    data = json_body()
    job_description = data.get('jobDescription')
    if not isinstance(job_description, str) or not job_description:
        raise ValidationError('jobDescription is required')
    matched = match_resumes(job_description, Resume.query.order_by(Resume.id).all())
    return jsonify({'resumes': [r.to_dict() for r in matched]})


# ========== MAIL ==========

@mail_bp.route('/send-email', methods=['POST'])
def send_email():
    data = json_body()
    if not data.get('to'):
        raise ValidationError('Recipient is required')
    relay_email(data['to'], data.get('subject'), data.get('body'))
    return jsonify({'message': 'Email sent successfully'})


@mail_bp.route('/email', methods=['POST'])
def submit_email():
    email = json_body().get('email')
    if not email:
        raise ValidationError('email is required')
    issue_otp(email)
    return jsonify({'success': True, 'message': 'OTP sent to your email for verification'})


@mail_bp.route('/verify-otp', methods=['POST'])
def check_otp():
    data = json_body()
    result = verify_otp(data.get('email'), data.get('otp'))
    if result is None:
        return jsonify({'success': False, 'message': 'Email not found'}), 404
    if not result:
        return jsonify({'success': False, 'message': 'Invalid OTP'}), 400
    return jsonify({'success': True, 'message': 'OTP verified successfully'})


@mail_bp.route('/email-count', methods=['GET'])
def email_count():
    return jsonify({'success': True, 'count': count_emails()})


# ========== APP ==========

def create_app(config_class=Config, test_config=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    if test_config:
        app.config.from_mapping(test_config)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    db.init_app(app)
    mail.init_app(app)
    register_error_handlers(app, db)

    for name in app.config['ENABLED_SERVICES']:
        if name not in SERVICES:
            raise ValueError(f'Unknown service {name!r} in ENABLED_SERVICES')
        app.register_blueprint(SERVICES[name])
    logger.info('Mounted services: %s', ', '.join(app.config['ENABLED_SERVICES']))

    with app.app_context():
        db.create_all()

    return app


if __name__ == '__main__':
    create_app().run(debug=True)
