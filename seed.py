import os
from summerreg import create_app
from summerreg.extensions import db
from summerreg.models import Course, User, UserRole

ADMIN_EMAIL = (os.getenv("ADMIN_EMAIL", "") or "").lower().strip()
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

COURSES = [
    "MATEMÁTICA I",
    "FUNDAMENTOS DE LA INFORMÁTICA",
    "LÓGICA MATEMÁTICA",
    "LENGUAJE Y COMUNICACIÓN",
    "INGLES I",
    "FORMACION CONSTITUCIONAL",
    "ECONOMIA DIGITAL EN VENEZUELA",
    "MATEMÁTICA II",
    "FÍSICA I",
    "ALGORITMOS I",
    "PROBLEMÁTICA CIENTÍFICA Y TECNOLÓGICA",
    "INGLES II",
    "ELECTIVA I",
    "ARTE Y CULTURA",
    "MATEMÁTICA III",
    "FÍSICA II",
    "ALGORITMOS II",
    "PROGRAMACIÓN I",
    "METODOLOGÍA Y TÉCNICAS DE INVESTIGACIÓN",
    "ELECTIVA II",
    "MATEMÁTICA IV",
    "PROBABILIDAD Y ESTADÍSTICA",
    "ESTRUCTURAS DISCRETAS I",
    "PROGRAMACIÓN II",
    "BASE DE DATOS",
    "ELECTIVA III",
    "ORGANIZACIÓN DEL COMPUTADOR",
    "ALGEBRA BOOLEANA",
    "ESTRUCTURAS DISCRETAS II",
    "PROGRAMACIÓN III",
    "TEORÍA DE SISTEMAS",
    "ELECTIVA IV",
    "ARQUITECTURA DEL COMPUTADOR",
    "MÉTODOS NUMÉRICOS",
    "INVESTIGACIÓN DE OPERACIONES",
    "INGENIERÍA ECONÓMICA",
    "SISTEMAS DE INFORMACIÓN I",
    "ELECTIVA V",
    "SISTEMAS OPERATIVOS",
    "CONTROL DE PROYECTOS",
    "ORGANIZACIÓN Y GESTIÓN EMPRESARIAL",
    "TRADUCTORES E INTERPRETES",
    "SISTEMAS DE INFORMACIÓN II",
    "REDES",
    "PASANTÍAS",
    "ELECTIVA DE ÁREA I",
    "LENGUAJES DE PROGRAMACIÓN",
    "SISTEMAS DE INFORMACIÓN III",
]

if not ADMIN_EMAIL or not ADMIN_PASSWORD:
    raise SystemExit("ADMIN_EMAIL and ADMIN_PASSWORD must be set")

app = create_app()

with app.app_context():
    db.create_all()

    existing = User.query.filter_by(email=ADMIN_EMAIL).first()
    if existing:
        print(f"Admin already exists: {existing.email} (id={existing.id})")
    else:
        admin = User(email=ADMIN_EMAIL, role=UserRole.admin)
        admin.set_password(ADMIN_PASSWORD)
        db.session.add(admin)
        print(f"Admin created: {admin.email}")

    capacity = app.config["DEFAULT_COURSE_CAPACITY"]
    created = 0
    for name in COURSES:
        if not Course.query.filter_by(name=name).first():
            db.session.add(Course(name=name, capacity=capacity))
            created += 1

    db.session.commit()
    print(f"Courses created: {created} (catalogue size {len(COURSES)})")
