import cloudinary
import cloudinary.uploader
from carwash.core.config import settings

# Configure Cloudinary
cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True
)

def upload_image(file, folder=None, public_id=None):
    """Upload an image to Cloudinary"""
    return cloudinary.uploader.upload(
        file,
        folder=folder or settings.PAYMENT_PROOF_FOLDER,
        public_id=public_id,
        overwrite=False,
        resource_type="image",
        transformation=[
            {"width": 1600, "height": 1600, "crop": "limit"},
            {"quality": "auto"}
        ]
    )

def delete_image(public_id):
    """Delete an image from Cloudinary"""
    return cloudinary.uploader.destroy(public_id)
