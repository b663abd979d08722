SKILL_VOCABULARY = [
    # Programming languages
    "javascript", "python", "java", "c++", "c#", "php", "ruby", "go", "rust", "swift",
    "typescript", "kotlin", "scala", "r", "matlab", "perl", "lua", "dart",

    # Web technologies
    "html", "css", "react", "angular", "vue", "nodejs", "express", "django", "flask",
    "spring", "asp.net", "laravel", "symfony", "rails", "bootstrap", "tailwind",
    "jquery", "webpack", "babel", "sass", "less",

    # Databases
    "mysql", "postgresql", "mongodb", "redis", "sqlite", "oracle", "sql server",
    "dynamodb", "cassandra", "elasticsearch", "neo4j",

    # Cloud & DevOps
    "aws", "azure", "gcp", "docker", "kubernetes", "jenkins", "terraform",
    "ansible", "puppet", "chef", "vagrant", "git", "github", "gitlab", "bitbucket",

    # Tools & platforms
    "linux", "ubuntu", "centos", "nginx", "apache", "tomcat", "jira", "confluence",
    "slack", "trello", "asana", "figma", "sketch", "photoshop", "illustrator",
]

NAME_SCAN_LINES = 5
NAME_MIN_TOKENS = 2
NAME_MAX_TOKENS = 4

EXPERIENCE_HEADERS = ["experience", "work history", "employment", "professional experience"]
JOB_TITLE_KEYWORDS = ["developer", "engineer", "analyst", "manager", "specialist", "consultant"]
SECTION_END_KEYWORDS = ["education", "skills", "certification"]

EDUCATION_KEYWORDS = ["university", "college", "bachelor", "master", "phd", "degree", "education"]

CERTIFICATION_KEYWORDS = [
    "certified",
    "certification",
    "certificate",
    "aws certified",
    "microsoft certified",
    "cisco",
    "comptia",
]

# Length bounds are exclusive and apply to the stripped line.
EXTRACTION_LIMITS = {
    "experience": {"min_length": 10, "max_length": 100, "max_entries": 10},
    "education": {"min_length": 5, "max_length": 150, "max_entries": 5},
    "certifications": {"min_length": 5, "max_length": 100, "max_entries": 10},
}
