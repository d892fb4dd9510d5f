# Services package init
"""
Larder Backend — Services Layer
================================

What:  Business rules between the routes (HTTP) and the repository or
       external collaborators.
How:   Services take plain values and an Identity, raise typed
       LarderError subclasses, and return response schemas. One instance
       of each is built in `main.create_app()` and kept on `app.state`.

Service Inventory:
    - AuthService:       register, login, token verification (bcrypt + PyJWT)
    - PantryService:     ingredients, calories, shopping list, leaderboard
    - ScanService:       upload → OCR → expiry date → food labels → cleanup
    - FileService:       temp storage for scan uploads
    - TextExtractor / LabelDetector (abstract): OCR and classifier contracts
    - TesseractTextExtractor, RekognitionLabelDetector: their implementations
    - RecipeService:     Spoonacular recipe search over httpx
"""
