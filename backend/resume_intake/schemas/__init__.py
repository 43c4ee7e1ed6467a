from . import application, analysis
