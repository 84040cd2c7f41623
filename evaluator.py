import os

from PyPDF2 import PdfReader
from docx import Document


def extract_text(path):
    ext = os.path.splitext(path)[1].lower()

    if ext == ".pdf":
        reader = PdfReader(path)
        return "\n".join(page.extract_text() or "" for page in reader.pages)

    elif ext == ".docx":
        doc = Document(path)
        return "\n".join(p.text for p in doc.paragraphs)

    elif ext == ".txt":
        with open(path, encoding="utf-8") as f:
            return f.read()

    return ""


def _split_skills(value):
    value = value.strip()
    return value.split(", ") if value else []


# Checked in this order against every line; the first label found in a line
# claims it, so "Name: Phone: 123" is a name line.
FIELD_RULES = (
    ("Name:", "name", str.strip),
    ("Email:", "email", str.strip),
    ("Phone:", "phone", str.strip),
    ("Skills:", "skills", _split_skills),
)


def parse_resume_text(text):
    """Pull the labelled fields out of plain resume text.

    Only fields whose label occurs somewhere are present in the result. A value
    runs from the label to the next repeat of that label on the same line. When
    a label occurs on several lines the last one wins.
    """
    resume_data = {}
    for line in text.split("\n"):
        for label, field, transform in FIELD_RULES:
            if label in line:
                resume_data[field] = transform(line.split(label)[1])
                break
    return resume_data


def search_resumes(resumes, term):
    term = (term or "").lower()
    if not term:
        return list(resumes)

    def hit(resume):
        if resume.name and term in resume.name.lower():
            return True
        return any(term in str(skill).lower() for skill in resume.skills or [])

    return [resume for resume in resumes if hit(resume)]


def match_resumes(job_description, resumes):
    return [
        resume for resume in resumes
        if any(isinstance(skill, str) and skill and skill in job_description
               for skill in resume.skills or [])
    ]


def recommend_jobs(skills, jobs):
    skills = {skill for skill in skills or [] if isinstance(skill, str)}
    return [
        job.title for job in jobs
        if any(isinstance(s, str) and s in skills for s in job.required_skills or [])
    ]
