class Translator:
    def __init__(self) -> None:
        self.language = "en"
        self.translations = {
            "en": {},
            "es": {
                "Exercise Log": "Registro de Ejercicios",
                "Diet": "Dieta",
                "Exercise": "Ejercicio",
                "Weight": "Peso",
                "Reps": "Repeticiones",
                "Notes": "Notas",
                "Date": "Fecha",
                "Add": "Agregar",
                "Delete": "Eliminar",
                "Close": "Cerrar",
                "Reload": "Recargar",
                "Metric": "Métrica",
                "New exercise name": "Nombre del nuevo ejercicio",
                "Search for food": "Buscar alimento",
                "Search": "Buscar",
                "Barcode": "Código de barras",
                "Look up": "Consultar",
                "Servings": "Porciones",
                "No entries yet": "Aún no hay registros",
            },
        }

    def set_language(self, lang: str) -> None:
        self.language = lang

    def gettext(self, key: str) -> str:
        return self.translations.get(self.language, {}).get(key, key)

translator = Translator()
